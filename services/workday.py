"""Workday window resolution."""

import re
from datetime import date, datetime
from typing import Optional

from models.entities import WorkdayWindow
from services.timezone_utils import today_in_timezone, zoned_time_to_utc

WORK_START_HOUR = 9
WORK_END_HOUR = 17

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_date_string(date_string: Optional[str]) -> Optional[tuple[int, int, int]]:
    """
    Parse a YYYY-MM-DD string into (year, month, day).

    Returns None for anything that does not match the pattern or has a
    zero component, or that names a day the calendar does not have.
    """
    if not isinstance(date_string, str) or not _DATE_PATTERN.fullmatch(date_string):
        return None

    year, month, day = (int(part) for part in date_string.split("-"))
    if not year or not month or not day:
        return None

    try:
        date(year, month, day)
    except ValueError:
        return None
    return year, month, day


def get_workday_bounds(
    time_zone: str,
    date_string: Optional[str] = None,
    now: Optional[datetime] = None
) -> WorkdayWindow:
    """
    Resolve the 09:00-17:00 window for a date in a zone.

    Without an explicit date, "today" is taken as observed in the zone.
    """
    explicit = parse_date_string(date_string)
    if explicit:
        year, month, day = explicit
    else:
        today = today_in_timezone(time_zone, now)
        year, month, day = today.year, today.month, today.day

    return WorkdayWindow(
        date=f"{year:04d}-{month:02d}-{day:02d}",
        work_start=zoned_time_to_utc(year, month, day, WORK_START_HOUR, 0, time_zone),
        work_end=zoned_time_to_utc(year, month, day, WORK_END_HOUR, 0, time_zone),
    )
