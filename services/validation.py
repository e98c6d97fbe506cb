"""Request validation performed before any analysis runs."""

from typing import Any

from services.workday import parse_date_string

TRUTHY_FLAG_VALUES = ("1", "true", "yes", "on")


class InputValidationError(ValueError):
    """Raised when a request is rejected before analysis."""


def is_advanced_response_enabled(value: Any) -> bool:
    """Booleans pass through; strings 1/true/yes/on (any case) are truthy."""
    if isinstance(value, bool):
        return value

    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_FLAG_VALUES

    return False


def validate_date(date_string: Any) -> None:
    """Reject a present-but-malformed date; an absent date means today."""
    if date_string and not parse_date_string(date_string):
        raise InputValidationError("Invalid date. Use YYYY-MM-DD.")


def validate_schedules(schedules: Any) -> list[dict]:
    """Ensure schedules is a non-empty list whose entries all carry a valid date."""
    if not isinstance(schedules, list) or not schedules:
        raise InputValidationError("schedules must be a non-empty array.")

    for schedule in schedules:
        if not isinstance(schedule, dict) or not parse_date_string(schedule.get("date")):
            raise InputValidationError("Each schedule.date must be YYYY-MM-DD.")

    return schedules
