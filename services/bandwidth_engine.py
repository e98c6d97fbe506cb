"""Core bandwidth analysis engine."""

import logging
from datetime import datetime
from typing import Optional, Union

from models.entities import DayAnalysis, MeetingType, MultiDayAnalysis, PersonaProfile
from models.personas import get_persona_profile
from services.calendar_service import (
    CalendarService,
    create_empty_meeting_type_minutes,
    minutes_between,
)
from services.interval_algebra import invert_intervals, merge_intervals
from services.preference_inference import (
    clamp,
    infer_meeting_type_preferences,
    meeting_preference_score,
)
from services.slot_scorer import DayContext, SlotScorer, round_half_up
from services.workday import get_workday_bounds

logger = logging.getLogger(__name__)

PersonaArg = Union[str, PersonaProfile, None]


class BandwidthEngine:
    """Engine for estimating usable bandwidth in a workday's free time."""

    def _resolve_persona(self, persona: PersonaArg) -> PersonaProfile:
        if isinstance(persona, PersonaProfile):
            return persona
        return get_persona_profile(persona)

    def analyze_day(
        self,
        events: list[dict],
        time_zone: str,
        date_string: Optional[str] = None,
        persona: PersonaArg = None,
        now: Optional[datetime] = None
    ) -> DayAnalysis:
        """
        Score the free time of one workday.

        Args:
            events: Raw calendar-like events
            time_zone: IANA zone name the workday is observed in
            date_string: YYYY-MM-DD (if None, today in time_zone)
            persona: Persona id or profile (unknown ids fall back to balanced)
            now: Reference instant for "today" (defaults to the current time)

        Returns:
            DayAnalysis with scored slots and day-level fit metrics
        """
        profile = self._resolve_persona(persona)
        window = get_workday_bounds(time_zone, date_string, now)
        persona_meeting_aversion = clamp(1 - profile.load_target)

        normalized = CalendarService(profile).normalize_events(events or [], window, time_zone)

        merged_busy = merge_intervals(normalized.busy_intervals)
        free_intervals = invert_intervals(merged_busy, window.work_start, window.work_end)

        total_busy_minutes = round_half_up(
            sum(minutes_between(block.start, block.end) for block in merged_busy)
        )
        workday_minutes = round_half_up(minutes_between(window.work_start, window.work_end))
        daily_load_score = clamp(total_busy_minutes / workday_minutes) if workday_minutes > 0 else 0.0

        preference_score = meeting_preference_score(normalized.meeting_type_minutes, profile)
        preferences = infer_meeting_type_preferences(normalized.meeting_type_minutes, profile)

        load_fit_score = clamp(1 - abs(daily_load_score - profile.load_target) / profile.load_tolerance)
        persona_fit_score = clamp(preference_score * 0.6 + load_fit_score * 0.4)

        scorer = SlotScorer(
            merged_busy,
            normalized.busy_intervals,
            DayContext(
                persona=profile,
                daily_load_score=daily_load_score,
                total_meetings=normalized.meeting_count,
                workday_minutes=workday_minutes,
                meeting_preference_score=preference_score,
                persona_meeting_aversion=persona_meeting_aversion,
            ),
        )
        available_slots = tuple(scorer.score_all(free_intervals))

        logger.debug(
            "Analyzed %s in %s for %s: %d meetings, %d busy minutes, %d slots",
            window.date, time_zone, profile.id,
            normalized.meeting_count, total_busy_minutes, len(available_slots)
        )

        return DayAnalysis(
            date=window.date,
            time_zone=time_zone,
            persona_id=profile.id,
            available_slots=available_slots,
            daily_load_score=daily_load_score,
            meeting_preference_score=preference_score,
            meeting_type_affinity_score=preferences.meeting_type_affinity_score,
            inferred_preferred_meeting_types=preferences.inferred_preferred_meeting_types,
            preference_confidence_score=preferences.preference_confidence_score,
            meeting_aversion_score=persona_meeting_aversion,
            load_fit_score=load_fit_score,
            persona_fit_score=persona_fit_score,
            meeting_type_minutes=dict(normalized.meeting_type_minutes),
            total_meetings=normalized.meeting_count,
            total_busy_minutes=total_busy_minutes,
            work_start=window.work_start,
            work_end=window.work_end,
        )

    def analyze_multi_day(
        self,
        schedules: list[dict],
        time_zone: str,
        persona: PersonaArg = None
    ) -> MultiDayAnalysis:
        """
        Analyze several days and aggregate them.

        Each schedule is {"date": "YYYY-MM-DD", "events": [...]}; days are
        independent and reported in input order.
        """
        profile = self._resolve_persona(persona)

        days = []
        for schedule in schedules:
            events = schedule.get("events")
            if not isinstance(events, list):
                events = []
            days.append(self.analyze_day(events, time_zone, schedule.get("date"), profile))

        count = len(days)
        average_daily_load_score = sum(day.daily_load_score for day in days) / count if count else 0.0
        average_persona_fit_score = sum(day.persona_fit_score for day in days) / count if count else 0.0

        aggregate_minutes = create_empty_meeting_type_minutes()
        for day in days:
            for meeting_type, minutes in day.meeting_type_minutes.items():
                aggregate_minutes[MeetingType(meeting_type)] += float(minutes or 0)

        return MultiDayAnalysis(
            time_zone=time_zone,
            persona_id=profile.id,
            days=tuple(days),
            average_daily_load_score=average_daily_load_score,
            average_persona_fit_score=average_persona_fit_score,
            aggregate_meeting_type_minutes=aggregate_minutes,
            preferences=infer_meeting_type_preferences(aggregate_minutes, profile),
        )
