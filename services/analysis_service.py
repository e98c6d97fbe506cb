"""Request-level entry points for manual calendar analysis."""

import logging
from typing import Any, Dict, Optional

import config
from models.personas import get_persona_profile
from services.bandwidth_engine import BandwidthEngine
from services.response_formatter import ResponseFormatter
from services.validation import (
    is_advanced_response_enabled,
    validate_date,
    validate_schedules,
)

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Validates analysis requests, runs the engine and formats the response.

    Request bodies use the same keys as the JSON routes they replace
    (timeZone, date, persona, advancedResponse, events / schedules).
    Validation failures raise InputValidationError before the engine runs.
    """

    def __init__(self, engine: Optional[BandwidthEngine] = None, default_time_zone: Optional[str] = None):
        """Initialize with an engine and the zone used when a request names none."""
        self.engine = engine or BandwidthEngine()
        self.default_time_zone = default_time_zone or config.DEFAULT_TIME_ZONE

    def _response_header(self, body: Dict[str, Any]) -> Dict[str, Any]:
        persona = get_persona_profile(body.get("persona"))
        return {
            "timeZone": body.get("timeZone") or self.default_time_zone,
            "persona": persona.id,
            "personaLabel": persona.label,
            "advancedResponse": is_advanced_response_enabled(body.get("advancedResponse")),
        }

    def analyze_manual(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Analyze a single day of manually entered events."""
        header = self._response_header(body)
        date_string = body.get("date")
        events = body.get("events")
        if not isinstance(events, list):
            events = []

        validate_date(date_string)

        analysis = self.engine.analyze_day(
            events,
            header["timeZone"],
            date_string or None,
            header["persona"],
        )
        logger.info(
            "Analyzed %s (%s, %s): %d slots",
            analysis.date, header["timeZone"], header["persona"], len(analysis.available_slots)
        )

        return {
            **header,
            **ResponseFormatter.format_day_analysis(analysis, header["advancedResponse"]),
        }

    def analyze_manual_multiday(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Analyze several days of manually entered events."""
        header = self._response_header(body)
        schedules = validate_schedules(body.get("schedules"))

        analysis = self.engine.analyze_multi_day(schedules, header["timeZone"], header["persona"])
        logger.info(
            "Analyzed %d days (%s, %s)",
            len(analysis.days), header["timeZone"], header["persona"]
        )

        return {
            **header,
            **ResponseFormatter.format_multi_day_analysis(analysis, header["advancedResponse"]),
        }
