# core/dates.py
from __future__ import annotations

import datetime
from typing import Any, Optional

INPUT_FORMAT = "%Y-%m-%d"     # date inputs and request bodies
DISPLAY_FORMAT = "%d-%m-%Y"   # read-only tables


def parse_date(value: Any) -> Optional[datetime.date]:
    """
    Calendar date of a backend value.

    Accepts date/datetime objects and ISO-8601 strings with or without a time
    part ("2024-03-05", "2024-03-05T00:00:00Z", "2024-03-05T10:00:00.000+05:30").
    The calendar date as written is kept; no timezone conversion happens.
    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.date.fromisoformat(s[:10])
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def is_valid_date(value: Any) -> bool:
    return parse_date(value) is not None


def to_input_date(value: Any) -> str:
    """YYYY-MM-DD for date inputs; empty string when missing."""
    d = parse_date(value)
    return d.strftime(INPUT_FORMAT) if d else ""


def to_display_date(value: Any, missing: str = "-") -> str:
    """DD-MM-YYYY for tables."""
    d = parse_date(value)
    return d.strftime(DISPLAY_FORMAT) if d else missing
