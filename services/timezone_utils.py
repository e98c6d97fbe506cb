"""Wall-clock and absolute-instant conversion for named time zones."""

import logging
from datetime import date, datetime, timedelta
from functools import lru_cache

import pytz

logger = logging.getLogger(__name__)

# Fixed-point passes used to settle the offset near DST transitions
OFFSET_CORRECTION_PASSES = 3


@lru_cache(maxsize=64)
def _get_timezone(time_zone: str):
    """Resolve a zone name, or None if pytz does not know it."""
    try:
        return pytz.timezone(time_zone)
    except (pytz.UnknownTimeZoneError, AttributeError, TypeError, ValueError):
        logger.warning("Unknown time zone %r, assuming UTC offset", time_zone)
        return None


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return pytz.UTC.localize(instant)
    return instant.astimezone(pytz.UTC)


def get_offset_minutes(instant: datetime, time_zone: str) -> int:
    """
    UTC offset of a zone at a given instant, in signed minutes.

    Unknown zones degrade to a zero offset instead of raising.
    """
    tz = _get_timezone(time_zone)
    if tz is None:
        return 0

    offset = _as_utc(instant).astimezone(tz).utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() // 60)


def zoned_time_to_utc(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    time_zone: str,
    second: int = 0
) -> datetime:
    """
    Convert a wall-clock time in a zone to a UTC instant.

    The wall-clock fields are first read as if they were UTC; the zone's
    offset at that guess is subtracted and the lookup repeated so the result
    settles on a consistent offset across DST changes.
    """
    wall_clock = datetime(year, month, day, hour, minute, second, tzinfo=pytz.UTC)

    instant = wall_clock
    for _ in range(OFFSET_CORRECTION_PASSES):
        offset = get_offset_minutes(instant, time_zone)
        candidate = wall_clock - timedelta(minutes=offset)
        if candidate == instant:
            break
        instant = candidate

    return instant


def to_wall_clock(instant: datetime, time_zone: str) -> datetime:
    """Naive wall-clock datetime of an instant as observed in a zone."""
    offset = get_offset_minutes(instant, time_zone)
    return (_as_utc(instant) + timedelta(minutes=offset)).replace(tzinfo=None)


def today_in_timezone(time_zone: str, now: datetime = None) -> date:
    """Current calendar date as observed in a zone (not process-local time)."""
    if now is None:
        now = datetime.now(pytz.UTC)
    return to_wall_clock(now, time_zone).date()


def format_iso_in_timezone(instant: datetime, time_zone: str) -> str:
    """Format an instant as ISO-8601 local time with a numeric UTC offset."""
    offset = get_offset_minutes(instant, time_zone)
    local = (_as_utc(instant) + timedelta(minutes=offset)).replace(tzinfo=None)

    sign = "+" if offset >= 0 else "-"
    hours, minutes = divmod(abs(offset), 60)
    return f"{local:%Y-%m-%dT%H:%M:%S}{sign}{hours:02d}:{minutes:02d}"
