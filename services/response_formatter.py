"""Structured response formatter for analysis results."""

from typing import Any, Dict, Mapping

from models.entities import DayAnalysis, MeetingType, MultiDayAnalysis, PenaltyBreakdown, ScoredSlot
from services.timezone_utils import format_iso_in_timezone

REPORT_PRECISION = 3


def _round(value: float) -> float:
    return round(value, REPORT_PRECISION)


def _reported_average(values) -> float:
    """Average of values as reported, so it agrees with the per-day figures."""
    reported = [_round(value) for value in values]
    return _round(sum(reported) / len(reported)) if reported else 0.0


class ResponseFormatter:
    """Formats analysis results into basic or advanced response payloads."""

    @staticmethod
    def format_meeting_type_minutes(minutes: Mapping[MeetingType, float]) -> Dict[str, float]:
        """Per-type minutes keyed by type name, in declaration order."""
        return {
            meeting_type.value: minutes.get(meeting_type, 0.0)
            for meeting_type in MeetingType
        }

    @staticmethod
    def format_penalty_breakdown(breakdown: PenaltyBreakdown) -> Dict[str, float]:
        """Every intermediate scoring term, rounded for reporting."""
        return {
            "uninterruptedScore": _round(breakdown.uninterrupted_score),
            "adjacencyPenalty": _round(breakdown.adjacency_penalty),
            "densityPenalty": _round(breakdown.density_penalty),
            "aversionLoadPenalty": _round(breakdown.aversion_load_penalty),
            "aversionTypePenalty": _round(breakdown.aversion_type_penalty),
            "dislikedTypePenalty": _round(breakdown.disliked_type_penalty),
            "rawBandwidthScore": _round(breakdown.raw_bandwidth_score),
            "minimumShortSlotScore": _round(breakdown.minimum_short_slot_score),
            "finalBandwidthScore": _round(breakdown.final_bandwidth_score),
        }

    @staticmethod
    def format_slot(slot: ScoredSlot, time_zone: str, advanced: bool = False) -> Dict[str, Any]:
        """Format one scored slot with local ISO timestamps."""
        payload = {
            "start": format_iso_in_timezone(slot.start, time_zone),
            "end": format_iso_in_timezone(slot.end, time_zone),
            "durationMinutes": slot.duration_minutes,
            "bandwidthScore": _round(slot.bandwidth_score),
            "bandwidthLevel": slot.bandwidth_level.value,
        }

        if advanced:
            payload["penaltyBreakdown"] = ResponseFormatter.format_penalty_breakdown(slot.penalty_breakdown)

        return payload

    @staticmethod
    def format_day_analysis(day: DayAnalysis, advanced: bool = False) -> Dict[str, Any]:
        """
        Format a day analysis.

        The basic view carries slots, load, fit and inferred preferences; the
        advanced view adds every preference, aversion and minute metric.
        """
        payload = {
            "date": day.date,
            "availableSlots": [
                ResponseFormatter.format_slot(slot, day.time_zone, advanced)
                for slot in day.available_slots
            ],
            "dailyLoadScore": _round(day.daily_load_score),
            "personaFitScore": _round(day.persona_fit_score),
            "inferredPreferredMeetingTypes": [
                meeting_type.value for meeting_type in day.inferred_preferred_meeting_types
            ],
        }

        if advanced:
            payload.update({
                "meetingPreferenceScore": _round(day.meeting_preference_score),
                "meetingTypeAffinityScore": _round(day.meeting_type_affinity_score),
                "preferenceConfidenceScore": _round(day.preference_confidence_score),
                "meetingAversionScore": _round(day.meeting_aversion_score),
                "loadFitScore": _round(day.load_fit_score),
                "meetingTypeMinutes": ResponseFormatter.format_meeting_type_minutes(day.meeting_type_minutes),
                "totalMeetings": day.total_meetings,
                "totalBusyMinutes": day.total_busy_minutes,
            })

        return payload

    @staticmethod
    def format_multi_day_analysis(analysis: MultiDayAnalysis, advanced: bool = False) -> Dict[str, Any]:
        """Format a multi-day analysis with its per-day views and averages."""
        preferences = analysis.preferences
        payload = {
            "days": [
                ResponseFormatter.format_day_analysis(day, advanced)
                for day in analysis.days
            ],
            "averageDailyLoadScore": _reported_average(day.daily_load_score for day in analysis.days),
            "averagePersonaFitScore": _reported_average(day.persona_fit_score for day in analysis.days),
            "inferredPreferredMeetingTypes": [
                meeting_type.value for meeting_type in preferences.inferred_preferred_meeting_types
            ] if preferences else [],
        }

        if advanced:
            payload["aggregateMeetingTypeMinutes"] = ResponseFormatter.format_meeting_type_minutes(
                analysis.aggregate_meeting_type_minutes
            )
            if preferences:
                payload["meetingTypeAffinityScore"] = _round(preferences.meeting_type_affinity_score)
                payload["preferenceConfidenceScore"] = _round(preferences.preference_confidence_score)

        return payload
