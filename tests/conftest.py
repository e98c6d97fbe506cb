"""
Pytest fixtures for bandwidth analyzer testing.

Provides:
- Engine and service instances
- Calendar event builders
- UTC instant helpers
"""

import pytest
from datetime import datetime
from typing import Any, Dict, Optional

import pytz

from models.personas import get_persona_profile
from services.analysis_service import AnalysisService
from services.bandwidth_engine import BandwidthEngine


TEST_DATE = "2024-06-03"


def utc(hour: int, minute: int = 0, day: int = 3, month: int = 6, year: int = 2024) -> datetime:
    """A UTC instant on the default test date."""
    return datetime(year, month, day, hour, minute, tzinfo=pytz.UTC)


def make_event(
    start: str,
    end: str,
    meeting_type: Optional[str] = None,
    date: str = TEST_DATE,
    suffix: str = "Z",
    **extra: Any
) -> Dict[str, Any]:
    """Build a timed calendar event from HH:MM strings."""
    event = {
        "start": {"dateTime": f"{date}T{start}:00{suffix}"},
        "end": {"dateTime": f"{date}T{end}:00{suffix}"},
    }
    if meeting_type is not None:
        event["meetingType"] = meeting_type
    event.update(extra)
    return event


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def engine():
    """A fresh bandwidth engine."""
    return BandwidthEngine()


@pytest.fixture
def analysis_service(engine):
    """Analysis service defaulting to UTC."""
    return AnalysisService(engine=engine, default_time_zone="UTC")


@pytest.fixture
def balanced():
    """The balanced persona profile."""
    return get_persona_profile("balanced")


@pytest.fixture
def maker():
    """The maker persona profile."""
    return get_persona_profile("maker")


# =============================================================================
# EVENT FIXTURES
# =============================================================================

@pytest.fixture
def busy_day_events():
    """A day with mixed meeting types, overlaps and noise."""
    return [
        make_event("08:30", "09:30", "investors"),
        make_event("09:15", "10:00", "customer"),
        make_event("11:00", "11:45", "candidates"),
        make_event("12:30", "13:00"),
        make_event("13:00", "13:30", type="internal"),
        make_event("14:10", "15:00", "customers"),
        make_event("15:20", "16:00", "candidates", status="cancelled"),
        make_event("16:30", "18:00", "other"),
    ]
