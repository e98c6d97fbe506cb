"""Calendar event normalization into busy intervals."""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import pytz

from models.entities import BusyInterval, MeetingType, PersonaProfile, WorkdayWindow
from services.timezone_utils import zoned_time_to_utc

logger = logging.getLogger(__name__)

MEETING_TYPE_ALIASES = {
    "investor": MeetingType.INVESTORS,
    "candidate": MeetingType.CANDIDATES,
    "customer": MeetingType.CUSTOMERS,
    "internal": MeetingType.OTHER,
}

_ALL_DAY_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def create_empty_meeting_type_minutes() -> dict[MeetingType, float]:
    """Zeroed per-type minute totals, in MeetingType declaration order."""
    return {meeting_type: 0.0 for meeting_type in MeetingType}


def minutes_between(start: datetime, end: datetime) -> float:
    """Non-negative minutes from start to end."""
    return max(0.0, (end - start).total_seconds() / 60)


def normalize_meeting_type(raw_type: Any) -> MeetingType:
    """Map any raw type value onto a MeetingType; unknown values become `other`."""
    value = str(raw_type or "other").lower().strip()
    try:
        return MeetingType(value)
    except ValueError:
        return MEETING_TYPE_ALIASES.get(value, MeetingType.OTHER)


def _get_dict(data: Any, key: str) -> dict:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def get_meeting_type_from_event(event: dict) -> MeetingType:
    """
    Resolve an event's meeting type.

    Priority: extendedProperties.private.meetingType, then meetingType,
    then type.
    """
    private = _get_dict(_get_dict(event, "extendedProperties"), "private")
    return normalize_meeting_type(
        private.get("meetingType")
        or event.get("meetingType")
        or event.get("type")
        or "other"
    )


def _parse_date_time(value: Any, time_zone: str) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are wall-clock in the zone."""
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return zoned_time_to_utc(
            parsed.year, parsed.month, parsed.day,
            parsed.hour, parsed.minute, time_zone, second=parsed.second
        )
    return parsed.astimezone(pytz.UTC)


def _parse_all_day(value: Any, time_zone: str) -> Optional[datetime]:
    """Resolve an all-day date to local midnight in the zone."""
    if not isinstance(value, str):
        return None

    match = _ALL_DAY_PATTERN.fullmatch(value.strip())
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return zoned_time_to_utc(year, month, day, 0, 0, time_zone)
    except ValueError:
        return None


def parse_calendar_time(value: Any, time_zone: str) -> Optional[datetime]:
    """Resolve an event endpoint ({dateTime} or {date}) to a UTC instant."""
    if not isinstance(value, dict):
        return None

    if value.get("dateTime"):
        return _parse_date_time(value["dateTime"], time_zone)

    if value.get("date"):
        return _parse_all_day(value["date"], time_zone)

    return None


@dataclass
class NormalizedEvents:
    """Busy intervals and minute totals for one workday."""
    busy_intervals: list[BusyInterval] = field(default_factory=list)
    meeting_type_minutes: dict[MeetingType, float] = field(
        default_factory=create_empty_meeting_type_minutes
    )
    meeting_count: int = 0


class CalendarService:
    """Turns raw calendar events into typed busy intervals for a workday."""

    def __init__(self, persona: PersonaProfile):
        """Initialize with the persona whose type weights tag each interval."""
        self.persona = persona

    def to_busy_interval(
        self,
        event: dict,
        window: WorkdayWindow,
        time_zone: str
    ) -> Optional[BusyInterval]:
        """
        Convert one event into a busy interval clipped to the workday.

        Returns None when the event is cancelled, unparseable, empty, or
        falls entirely outside the window.
        """
        if not isinstance(event, dict):
            logger.debug("Skipping non-mapping event: %r", event)
            return None

        if event.get("status") == "cancelled":
            logger.debug("Skipping cancelled event %s", event.get("id"))
            return None

        start = parse_calendar_time(event.get("start"), time_zone)
        end = parse_calendar_time(event.get("end"), time_zone)
        if start is None or end is None or end <= start:
            logger.debug("Skipping event %s with unusable start/end", event.get("id"))
            return None

        clipped_start = max(start, window.work_start)
        clipped_end = min(end, window.work_end)
        if clipped_end <= clipped_start:
            logger.debug("Skipping event %s outside the workday", event.get("id"))
            return None

        meeting_type = get_meeting_type_from_event(event)
        return BusyInterval(
            start=clipped_start,
            end=clipped_end,
            meeting_type=meeting_type,
            meeting_type_weight=self.persona.weight_for(meeting_type),
        )

    def normalize_events(
        self,
        events: list[dict],
        window: WorkdayWindow,
        time_zone: str
    ) -> NormalizedEvents:
        """Normalize every event, accumulating per-type minutes and the meeting count."""
        result = NormalizedEvents()

        for event in events:
            busy = self.to_busy_interval(event, window, time_zone)
            if busy is None:
                continue

            # Counted before merging, so overlapping events each count
            result.meeting_count += 1
            result.meeting_type_minutes[busy.meeting_type] += minutes_between(busy.start, busy.end)
            result.busy_intervals.append(busy)

        return result
