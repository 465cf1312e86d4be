from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Union

from ..core.exceptions import ValidationError

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Union[str, date, None], field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
    try:
        return parse_iso_date((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def coerce_optional_date(value: Union[str, date, None], field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return coerce_date(value, field_name)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
