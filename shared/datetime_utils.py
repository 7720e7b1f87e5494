"""
Date/time helpers — framework-agnostic.

MongoDB hands back naive datetimes unless the client is created with
``tz_aware=True``; everything in this service compares aware UTC values, so
stored datetimes pass through ``ensure_utc`` before any comparison.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime.

    Naive datetimes (no ``tzinfo``) are assumed to be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    """True when *expires_at* is at or before *now* (defaults to the current time)."""
    return ensure_utc(expires_at) <= (ensure_utc(now) or utcnow())
