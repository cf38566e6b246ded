from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Date must be in YYYY-MM-DD format")


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into a minute-precision time."""
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("Time must be in HH:MM format")


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def format_12h(value: Optional[time], placeholder: str) -> str:
    """Render a time-of-day as `h:MM AM/PM` (no leading zero on the hour)."""
    if value is None:
        return placeholder
    suffix = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {suffix}"


def format_report_date(value: date) -> str:
    """MM-DD-YYYY, the layout used in report rows."""
    return value.strftime("%m-%d-%Y")


def normalize_time(value: Any) -> Optional[time]:
    """Coerce a TIME column to `datetime.time`.

    The pure-Python connector hands back a timedelta since midnight; other
    drivers and fixtures may give a time or an `HH:MM[:SS]` string.
    """

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    if isinstance(value, str):
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
        raise ValueError(f"Invalid time string: {value!r}")
    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")


def now_local() -> datetime:
    """Current institution-local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
