"""
Timezone-safe datetime helpers.

All timestamps handled by the review engine are timezone-aware. SQLite has
no native timezone support, so the persistence layer stores naive UTC and
converts at the boundary with ``to_naive_utc`` / ``ensure_utc``.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive input is taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware or naive datetime to naive UTC for storage."""
    return ensure_utc(value).replace(tzinfo=None)
