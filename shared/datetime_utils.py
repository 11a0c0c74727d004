"""
Date/time helpers shared by services and response builders.

MongoDB hands back naive datetimes unless the client is tz-aware, so every
comparison goes through ensure_utc().
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as a timezone-aware UTC datetime (naive values are assumed UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_millis(value: Optional[datetime]) -> Optional[int]:
    """Convert *value* to Unix epoch milliseconds, the timestamp format of API responses."""
    value = ensure_utc(value)
    if value is None:
        return None
    return int(value.timestamp() * 1000)
