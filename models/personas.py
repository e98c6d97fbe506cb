"""Built-in persona profiles."""

from types import MappingProxyType
from typing import Optional

from models.entities import MeetingType, PersonaProfile

DEFAULT_PERSONA = "balanced"

PERSONA_PROFILES = MappingProxyType({
    "meeting-heavy": PersonaProfile(
        id="meeting-heavy",
        label="Meeting-heavy",
        load_target=0.75,
        load_tolerance=0.35,
        adjacency_penalty_weight=0.12,
        density_penalty_weight=0.12,
        preference_relief=0.45,
        type_weights=MappingProxyType({
            MeetingType.INVESTORS: 1.0,
            MeetingType.CUSTOMERS: 0.9,
            MeetingType.CANDIDATES: 0.8,
            MeetingType.OTHER: 0.6,
        }),
    ),
    "balanced": PersonaProfile(
        id="balanced",
        label="Balanced",
        load_target=0.5,
        load_tolerance=0.3,
        adjacency_penalty_weight=0.18,
        density_penalty_weight=0.2,
        preference_relief=0.25,
        type_weights=MappingProxyType({
            MeetingType.INVESTORS: 0.85,
            MeetingType.CUSTOMERS: 0.95,
            MeetingType.CANDIDATES: 0.9,
            MeetingType.OTHER: 0.6,
        }),
    ),
    "maker": PersonaProfile(
        id="maker",
        label="Maker / Focus",
        load_target=0.25,
        load_tolerance=0.25,
        adjacency_penalty_weight=0.24,
        density_penalty_weight=0.3,
        preference_relief=0.1,
        type_weights=MappingProxyType({
            MeetingType.INVESTORS: 0.75,
            MeetingType.CUSTOMERS: 0.8,
            MeetingType.CANDIDATES: 0.7,
            MeetingType.OTHER: 0.45,
        }),
    ),
})


def get_persona_profile(persona_id: Optional[str]) -> PersonaProfile:
    """Look up a persona, falling back to the balanced profile for unknown ids."""
    if not isinstance(persona_id, str):
        return PERSONA_PROFILES[DEFAULT_PERSONA]
    return PERSONA_PROFILES.get(persona_id, PERSONA_PROFILES[DEFAULT_PERSONA])
