from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError
from .time_window import is_hhmm, minute_of_day


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return number


def require_hhmm(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not is_hhmm(value):
        raise ValidationError(f"{field_name} must be HH:mm")
    return value.strip()


def require_ordered(start: Optional[str], end: Optional[str], label: str) -> None:
    if start and end and minute_of_day(start) > minute_of_day(end):
        raise ValidationError(f"{label}: start must not be after end")
