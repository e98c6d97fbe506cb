"""Domain models for the Bandwidth Analyzer."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional


class MeetingType(str, Enum):
    """Kind of meeting a busy block represents."""
    INVESTORS = "investors"
    CANDIDATES = "candidates"
    CUSTOMERS = "customers"
    OTHER = "other"


class BandwidthLevel(str, Enum):
    """Discrete bucket for a bandwidth score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class WorkdayWindow:
    """The 09:00-17:00 window of one date in one time zone."""
    date: str  # YYYY-MM-DD
    work_start: datetime  # UTC
    work_end: datetime  # UTC


@dataclass(frozen=True)
class BusyInterval:
    """A calendar event clipped to the workday."""
    start: datetime
    end: datetime
    meeting_type: MeetingType = MeetingType.OTHER
    meeting_type_weight: float = 0.0


@dataclass(frozen=True)
class MergedBusyBlock:
    """Union of overlapping or touching busy intervals, without a meeting type."""
    start: datetime
    end: datetime


@dataclass(frozen=True)
class FreeInterval:
    """A gap between merged busy blocks inside the workday."""
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PersonaProfile:
    """Scoring coefficients for one work style."""
    id: str
    label: str
    load_target: float  # ideal booked fraction of the workday
    load_tolerance: float
    adjacency_penalty_weight: float
    density_penalty_weight: float
    preference_relief: float
    type_weights: Mapping[MeetingType, float]

    def weight_for(self, meeting_type: MeetingType) -> float:
        """Desirability weight of a meeting type, falling back to `other`."""
        return self.type_weights.get(meeting_type, self.type_weights[MeetingType.OTHER])


@dataclass(frozen=True)
class PenaltyBreakdown:
    """Every intermediate term of a slot score."""
    uninterrupted_score: float
    adjacency_penalty: float
    density_penalty: float
    aversion_load_penalty: float
    aversion_type_penalty: float
    disliked_type_penalty: float
    raw_bandwidth_score: float
    minimum_short_slot_score: float
    final_bandwidth_score: float


@dataclass(frozen=True)
class ScoredSlot:
    """A free interval with its bandwidth estimate."""
    start: datetime
    end: datetime
    duration_minutes: int
    bandwidth_score: float
    bandwidth_level: BandwidthLevel
    penalty_breakdown: PenaltyBreakdown


@dataclass(frozen=True)
class PreferenceSummary:
    """Meeting-type preferences inferred from a minutes distribution."""
    inferred_preferred_meeting_types: tuple[MeetingType, ...]
    meeting_type_affinity_score: float
    preference_confidence_score: float


@dataclass(frozen=True)
class DayAnalysis:
    """Scored slots and fit metrics for a single day."""
    date: str
    time_zone: str
    persona_id: str
    available_slots: tuple[ScoredSlot, ...]
    daily_load_score: float
    meeting_preference_score: float
    meeting_type_affinity_score: float
    inferred_preferred_meeting_types: tuple[MeetingType, ...]
    preference_confidence_score: float
    meeting_aversion_score: float
    load_fit_score: float
    persona_fit_score: float
    meeting_type_minutes: dict[MeetingType, float]
    total_meetings: int
    total_busy_minutes: int
    work_start: Optional[datetime] = None
    work_end: Optional[datetime] = None


@dataclass(frozen=True)
class MultiDayAnalysis:
    """Day analyses plus averages across the days."""
    time_zone: str
    persona_id: str
    days: tuple[DayAnalysis, ...]
    average_daily_load_score: float
    average_persona_fit_score: float
    aggregate_meeting_type_minutes: dict[MeetingType, float] = field(default_factory=dict)
    preferences: Optional[PreferenceSummary] = None
