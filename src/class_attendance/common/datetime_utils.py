from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError("Invalid date (expected YYYY-MM-DD)", field=field_name)
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (expected YYYY-MM-DD)", field=field_name)


def parse_hhmm(value: str, field_name: str) -> time:
    """Parse HH:MM (or HH:MM:SS) into time."""
    if not isinstance(value, str):
        raise ValidationError("Invalid time (expected HH:MM)", field=field_name)
    v = value.strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError("Invalid time (expected HH:MM)", field=field_name)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()
