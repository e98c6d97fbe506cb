"""Meeting-type preference inference from minute distributions."""

from typing import Mapping

from models.entities import MeetingType, PersonaProfile, PreferenceSummary


def clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    """Clamp a value to [minimum, maximum]."""
    return min(maximum, max(minimum, value))


def meeting_preference_score(
    meeting_type_minutes: Mapping[MeetingType, float],
    persona: PersonaProfile
) -> float:
    """Minute-weighted average of the persona's type weights, or the `other` weight if idle."""
    total_minutes = sum(meeting_type_minutes.values())
    if total_minutes <= 0:
        return clamp(persona.weight_for(MeetingType.OTHER))

    weighted = sum(
        minutes * persona.weight_for(meeting_type)
        for meeting_type, minutes in meeting_type_minutes.items()
    )
    return clamp(weighted / total_minutes)


def infer_meeting_type_preferences(
    meeting_type_minutes: Mapping[MeetingType, float],
    persona: PersonaProfile
) -> PreferenceSummary:
    """
    Infer which meeting types dominate a day (or several days).

    The two types with the most minutes are reported as preferred; ties keep
    MeetingType declaration order. Confidence is the share of minutes held by
    the largest type.
    """
    ordered = sorted(
        (
            (meeting_type, meeting_type_minutes.get(meeting_type, 0.0))
            for meeting_type in MeetingType
        ),
        key=lambda item: item[1],
        reverse=True,
    )

    total_minutes = sum(minutes for _, minutes in ordered)
    preferred = tuple(meeting_type for meeting_type, minutes in ordered if minutes > 0)[:2]

    if total_minutes > 0:
        confidence = clamp(ordered[0][1] / total_minutes)
    else:
        confidence = 0.0

    return PreferenceSummary(
        inferred_preferred_meeting_types=preferred,
        meeting_type_affinity_score=meeting_preference_score(meeting_type_minutes, persona),
        preference_confidence_score=confidence,
    )
