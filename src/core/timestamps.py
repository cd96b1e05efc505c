"""
Timestamp conversion utilities for saved tab data.

OneTab stores every creation time as milliseconds since the Unix epoch
(e.g. ``1760074389851``). The canonical session serialization uses the same
unit, so these helpers are the only place where that conversion happens.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms_to_datetime(ms: int | float) -> datetime:
    """
    Convert a Unix millisecond timestamp to an aware UTC datetime.

    Whole seconds are ``ms // 1000``; the remainder becomes the sub-second
    part. A non-finite value, or one outside the range ``datetime`` can
    represent, falls back to the Unix epoch instead of raising.

    Example:
        >>> ms_to_datetime(1760074389851).isoformat()
        '2025-10-10T05:33:09.851000+00:00'
    """
    try:
        seconds, remainder = divmod(int(ms), 1000)
        return UNIX_EPOCH + timedelta(seconds=seconds, microseconds=remainder * 1000)
    except (OverflowError, ValueError, TypeError):
        return UNIX_EPOCH


def datetime_to_ms(value: datetime) -> int:
    """Convert a datetime to Unix milliseconds (naive values are treated as UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - UNIX_EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_created_annotation(value: datetime) -> str:
    """
    Render a group creation time the way the markdown export writes it.

    Example:
        >>> format_created_annotation(datetime(2025, 3, 20, 22, 8, 46, tzinfo=timezone.utc))
        '3/20/2025, 10:08:46 PM'
    """
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value.month}/{value.day}/{value.year}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
