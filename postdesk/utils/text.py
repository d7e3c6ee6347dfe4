"""Date formatting and reading time helpers."""
from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any

INVALID_DATE = "Invalid Date"


def _to_utc_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            # Epoch milliseconds, the way browsers and JSON clients send them
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    # Naive values are taken to already be UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(value: Any, fmt: str = "default") -> str:
    """
    Format a date for display.

    ``"YYYY-MM-DD"`` gives the zero-padded UTC calendar date; anything else
    gives ``"Jan 15, 2024"`` style output in UTC. Values that cannot be read
    as a date give ``"Invalid Date"``.
    """
    dt = _to_utc_datetime(value)
    if dt is None:
        return INVALID_DATE

    if fmt == "YYYY-MM-DD":
        return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"

    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def calculate_reading_time(text: str | None, words_per_minute: int = 200) -> int:
    """Minutes needed to read text at the given rate, rounded up."""
    if not text or not text.strip():
        return 0
    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive")
    words = len(text.split())
    return math.ceil(words / words_per_minute)
