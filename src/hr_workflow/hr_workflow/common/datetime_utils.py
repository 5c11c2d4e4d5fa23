from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into a plain calendar date (no timezone involved)."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def utc_now() -> datetime:
    """Current UTC instant.

    Note: Wrapped so tests can inject a fixed clock instead.
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_short_date(value: date) -> str:
    """Render as 'Dec 15'."""
    return f"{value:%b} {value.day}"


def format_date_range(start: date, end: date) -> str:
    first = format_short_date(start)
    last = format_short_date(end)
    return first if first == last else f"{first} to {last}"
