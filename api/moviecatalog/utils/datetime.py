"""Datetime parsing helpers for provider payloads."""

from __future__ import annotations

from datetime import date, datetime

_DISPLAY_FORMATS = ("%d %b %Y", "%d %B %Y")


def parse_date(value: str | None) -> date | None:
    """Parse ISO (YYYY, YYYY-MM, YYYY-MM-DD) or OMDb-style "02 Jun 2023" dates."""
    if not value:
        return None
    value = value.strip()
    try:
        if len(value) == 4:
            return date.fromisoformat(f"{value}-01-01")
        if len(value) == 7:
            return date.fromisoformat(f"{value}-01")
        return date.fromisoformat(value)
    except ValueError:
        pass
    for fmt in _DISPLAY_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None
