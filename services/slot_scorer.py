"""Bandwidth scoring for free slots."""

import math
from dataclasses import dataclass
from typing import Sequence

from models.entities import (
    BandwidthLevel,
    BusyInterval,
    FreeInterval,
    MergedBusyBlock,
    PenaltyBreakdown,
    PersonaProfile,
    ScoredSlot,
)
from services.calendar_service import minutes_between
from services.preference_inference import clamp

# A 90 minute uninterrupted block scores full utility
IDEAL_BLOCK_MINUTES = 90
ADJACENCY_WINDOW_MINUTES = 15
ADJACENCY_SCALE = 0.45
DISLIKED_TYPE_WINDOW_MINUTES = 45
DISLIKED_TYPE_SCALE = 0.12
MAX_DENSITY_PENALTY = 0.45
HIGH_BANDWIDTH_THRESHOLD = 0.7
MEDIUM_BANDWIDTH_THRESHOLD = 0.4
SHORT_SLOT_MIN_MINUTES = 30
SHORT_SLOT_MAX_MINUTES = 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def bandwidth_level_for(score: float) -> BandwidthLevel:
    """Bucket a bandwidth score into low / medium / high."""
    if score >= HIGH_BANDWIDTH_THRESHOLD:
        return BandwidthLevel.HIGH
    if score >= MEDIUM_BANDWIDTH_THRESHOLD:
        return BandwidthLevel.MEDIUM
    return BandwidthLevel.LOW


def find_neighbors(slot: FreeInterval, busy_intervals: Sequence):
    """
    Nearest busy blocks on each side of a slot.

    Returns (before, after): the block ending latest at or before the slot
    start, and the block starting earliest at or after the slot end.
    """
    before = None
    after = None

    for busy in busy_intervals:
        if busy.end <= slot.start:
            if before is None or busy.end >= before.end:
                before = busy
        elif busy.start >= slot.end:
            if after is None or busy.start < after.start:
                after = busy

    return before, after


@dataclass(frozen=True)
class DayContext:
    """Day-level inputs shared by every slot of one analysis."""
    persona: PersonaProfile
    daily_load_score: float
    total_meetings: int
    workday_minutes: float
    meeting_preference_score: float
    persona_meeting_aversion: float


class SlotScorer:
    """Scores free slots against the merged and typed busy blocks of a day."""

    def __init__(
        self,
        merged_busy: Sequence[MergedBusyBlock],
        typed_busy: Sequence[BusyInterval],
        context: DayContext
    ):
        self.merged_busy = list(merged_busy)
        self.typed_busy = sorted(typed_busy, key=lambda busy: busy.start)
        self.context = context

    def adjacency_penalty(self, slot: FreeInterval) -> float:
        """Penalty for sitting within 15 minutes of any busy block."""
        before, after = find_neighbors(slot, self.merged_busy)
        weight = self.context.persona.adjacency_penalty_weight
        penalty = 0.0

        gaps = []
        if before is not None:
            gaps.append(minutes_between(before.end, slot.start))
        if after is not None:
            gaps.append(minutes_between(slot.end, after.start))

        for gap in gaps:
            if gap < ADJACENCY_WINDOW_MINUTES:
                penalty += ((ADJACENCY_WINDOW_MINUTES - gap) / ADJACENCY_WINDOW_MINUTES) * weight * ADJACENCY_SCALE

        return penalty

    def disliked_type_penalty(self, slot: FreeInterval) -> float:
        """Penalty for sitting near meeting types the persona weights low."""
        before, after = find_neighbors(slot, self.typed_busy)
        aversion = self.context.persona_meeting_aversion
        penalty = 0.0

        neighbors = []
        if before is not None:
            neighbors.append((before, minutes_between(before.end, slot.start)))
        if after is not None:
            neighbors.append((after, minutes_between(slot.end, after.start)))

        for busy, gap in neighbors:
            if gap >= DISLIKED_TYPE_WINDOW_MINUTES:
                continue
            proximity = clamp((DISLIKED_TYPE_WINDOW_MINUTES - gap) / DISLIKED_TYPE_WINDOW_MINUTES)
            dislike = clamp(1 - busy.meeting_type_weight)
            penalty += proximity * dislike * DISLIKED_TYPE_SCALE * aversion

        return penalty

    def density_penalty(self) -> float:
        """Penalty for how booked the day is, relieved by preferred meeting types."""
        ctx = self.context
        workday_hours = ctx.workday_minutes / 60
        meetings_per_hour = ctx.total_meetings / workday_hours if workday_hours > 0 else 0.0

        raw = clamp(
            (ctx.daily_load_score * ctx.persona.density_penalty_weight + min(0.3, meetings_per_hour * 0.06)) * 0.75,
            0,
            MAX_DENSITY_PENALTY,
        )
        relief = 1 - ctx.meeting_preference_score * ctx.persona.preference_relief
        return clamp(raw * relief, 0, MAX_DENSITY_PENALTY)

    def minimum_short_slot_score(self) -> float:
        """Floor applied to 30-59 minute slots."""
        ctx = self.context
        return clamp(
            0.08 + ctx.meeting_preference_score * 0.08 - ctx.persona_meeting_aversion * 0.04,
            0.06,
            0.16,
        )

    def score(self, slot: FreeInterval) -> ScoredSlot:
        """Score a single free slot."""
        ctx = self.context
        if slot.end < slot.start:
            raise ValueError(f"Free slot ends before it starts: {slot.start} > {slot.end}")
        duration_minutes = round_half_up((slot.end - slot.start).total_seconds() / 60)

        uninterrupted_score = clamp(duration_minutes / IDEAL_BLOCK_MINUTES)
        adjacency_penalty = self.adjacency_penalty(slot)
        disliked_type_penalty = self.disliked_type_penalty(slot)
        density_penalty = self.density_penalty()
        aversion_load_penalty = ctx.daily_load_score * ctx.persona_meeting_aversion * 0.1
        aversion_type_penalty = (1 - ctx.meeting_preference_score) * ctx.persona_meeting_aversion * 0.12

        raw_score = (
            uninterrupted_score
            - adjacency_penalty
            - density_penalty
            - aversion_load_penalty
            - aversion_type_penalty
            - disliked_type_penalty
        )
        bandwidth_score = clamp(raw_score)

        minimum_short_slot_score = 0.0
        if SHORT_SLOT_MIN_MINUTES <= duration_minutes < SHORT_SLOT_MAX_MINUTES:
            minimum_short_slot_score = self.minimum_short_slot_score()
            bandwidth_score = max(bandwidth_score, minimum_short_slot_score)

        return ScoredSlot(
            start=slot.start,
            end=slot.end,
            duration_minutes=duration_minutes,
            bandwidth_score=bandwidth_score,
            bandwidth_level=bandwidth_level_for(bandwidth_score),
            penalty_breakdown=PenaltyBreakdown(
                uninterrupted_score=uninterrupted_score,
                adjacency_penalty=adjacency_penalty,
                density_penalty=density_penalty,
                aversion_load_penalty=aversion_load_penalty,
                aversion_type_penalty=aversion_type_penalty,
                disliked_type_penalty=disliked_type_penalty,
                raw_bandwidth_score=raw_score,
                minimum_short_slot_score=minimum_short_slot_score,
                final_bandwidth_score=bandwidth_score,
            ),
        )

    def score_all(self, slots: Sequence[FreeInterval]) -> list[ScoredSlot]:
        """Score non-empty slots in order."""
        return [self.score(slot) for slot in slots if slot.end > slot.start]
