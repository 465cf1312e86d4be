from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_hours(value: Any, field_name: str = "Hours") -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(hours) or hours <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return hours


def require_non_negative(value: Any, field_name: str) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def require_clock_time(value: str, field_name: str) -> str:
    """Validate a "HH:MM" clock string and return it normalized."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a time (HH:MM)")
    v = (value or "").strip()
    try:
        return datetime.strptime(v, "%H:%M").strftime("%H:%M")
    except ValueError:
        raise ValidationError(f"{field_name} must be a time (HH:MM)")
