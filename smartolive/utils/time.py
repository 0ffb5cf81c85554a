"""Utility functions for time handling.

Engine inputs may carry aware or naive timestamps. Naive values are read as
local wall-clock time; aware values are compared as-is. Time-of-day checks
(windows, fallback daylight, daily limit) use the wall-clock time carried by
the injected clock value, so the clock decides which timezone is "local".
"""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Any, Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Return current local time as an aware datetime."""
    return datetime.now().astimezone()


def ensure_aware(dt: datetime) -> datetime:
    """Attach the local timezone to naive datetimes."""
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def start_of_day(dt: datetime) -> datetime:
    """Return local midnight of the day containing ``dt``."""
    return ensure_aware(dt).replace(hour=0, minute=0, second=0, microsecond=0)


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Minutes elapsed from ``earlier`` to ``later`` (negative if reversed)."""
    return (ensure_aware(later) - ensure_aware(earlier)).total_seconds() / 60.0


def parse_time_of_day(value: Any) -> time | None:
    """
    Parse ``HH:MM`` (or ``HH:MM:SS``) into a time, returning None on failure.

    Args:
        value: String or time to coerce
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


def coerce_datetime(value: Any) -> datetime | None:
    """
    Coerce value to an aware datetime, returning None on failure.

    Args:
        value: ISO-8601 string or datetime to coerce
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str):
        try:
            text = value.strip().replace("Z", "+00:00")
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None
