"""Conversion between the editable event table and calendar-like events."""

import logging
from datetime import datetime, time
from typing import Any, Dict, List, Optional

import pandas as pd

from models.entities import MeetingType

logger = logging.getLogger(__name__)

EVENT_TABLE_COLUMNS = ["start", "end", "meetingType"]


def default_rows() -> pd.DataFrame:
    """Empty event table."""
    return pd.DataFrame(columns=EVENT_TABLE_COLUMNS)


def parse_time_value(value: Any) -> Optional[time]:
    """
    Read a wall-clock time from an edited cell.

    Cells of an untyped column come back from the editor as strings such as
    "09:00:00.000"; typed cells come back as `time`. Blank or unparseable
    cells give None.
    """
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        parsed = pd.Timestamp(value.strip())
    except (ValueError, TypeError, OverflowError):
        logger.debug("Unparseable time cell: %r", value)
        return None

    if pd.isna(parsed):
        return None
    return parsed.time()


def rows_to_events(date_string: str, rows: Optional[pd.DataFrame]) -> List[Dict[str, Any]]:
    """Turn edited table rows into calendar-like events in the selected zone."""
    if rows is None:
        return []

    events = []
    for row in rows.to_dict("records"):
        start = parse_time_value(row.get("start"))
        end = parse_time_value(row.get("end"))
        if start is None or end is None:
            continue

        meeting_type = row.get("meetingType")
        if not isinstance(meeting_type, str) or not meeting_type:
            meeting_type = MeetingType.OTHER.value

        events.append({
            "start": {"dateTime": f"{date_string}T{start:%H:%M}:00"},
            "end": {"dateTime": f"{date_string}T{end:%H:%M}:00"},
            "meetingType": meeting_type,
        })
    return events
