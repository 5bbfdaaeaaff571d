"""Date parsing and display helpers for entry dates and filter bounds."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 date or date-time string into a timezone-aware datetime.

    Calendar dates ("2024-01-05") map to midnight. Naive values are taken as UTC.

    Raises:
        ValueError: If the string is not ISO 8601
    """
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def try_parse_iso8601(value: str) -> datetime | None:
    try:
        return parse_iso8601(value)
    except (TypeError, ValueError, AttributeError):
        return None


def coerce_bound(value: Any) -> datetime | None:
    """Normalize a date filter bound, returning None when it cannot be used.

    Accepts datetimes, dates and ISO 8601 strings. Anything else, including an
    unparsable string, yields None so the bound places no restriction.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        return try_parse_iso8601(value)
    return None


def format_date(value: str) -> str:
    """Format an entry date for display, e.g. "January 5, 2024".

    Unparsable values are returned unchanged.
    """
    parsed = try_parse_iso8601(value)
    if parsed is None:
        return value
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_bound(value: datetime | None) -> str:
    """Format a filter bound as a short label, e.g. "Jan 05, 2024"."""
    if value is None:
        return ""
    return value.strftime("%b %d, %Y")
