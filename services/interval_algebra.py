"""Merging and inverting time intervals."""

from datetime import datetime
from typing import Iterable, Sequence

from models.entities import FreeInterval, MergedBusyBlock


def merge_intervals(intervals: Iterable) -> list[MergedBusyBlock]:
    """
    Merge overlapping or touching intervals.

    Accepts anything with `start` and `end` attributes and returns busy blocks
    without meeting types, sorted by start.
    """
    ordered = sorted(intervals, key=lambda interval: interval.start)
    if not ordered:
        return []

    merged = []
    current_start, current_end = ordered[0].start, ordered[0].end

    for interval in ordered[1:]:
        if interval.start <= current_end:
            current_end = max(current_end, interval.end)
        else:
            merged.append(MergedBusyBlock(start=current_start, end=current_end))
            current_start, current_end = interval.start, interval.end

    merged.append(MergedBusyBlock(start=current_start, end=current_end))
    return merged


def invert_intervals(
    busy_intervals: Sequence[MergedBusyBlock],
    range_start: datetime,
    range_end: datetime
) -> list[FreeInterval]:
    """
    Free intervals of [range_start, range_end] not covered by merged busy blocks.

    Busy blocks must already be merged and sorted.
    """
    available = []
    cursor = range_start

    for busy in busy_intervals:
        if busy.start > cursor:
            available.append(FreeInterval(start=cursor, end=busy.start))
        cursor = max(cursor, busy.end)

    if cursor < range_end:
        available.append(FreeInterval(start=cursor, end=range_end))

    return available
