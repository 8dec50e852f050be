"""
Forgetting-curve review ladder.

Each learned item sits on a mastery level between 0 and 7. A review moves it
exactly one step: up when remembered, down when forgotten. The next review is
scheduled from a fixed interval per level:

    Level | Interval
    ------+-----------
      0   | 10 minutes
      1   | 1 hour
      2   | 1 day
      3   | 1 week
      4   | 2 weeks
      5   | 1 month (30 days)
      6   | 2 months (60 days)
      7   | 6 months (180 days)

There are no ease factors; the ladder itself never changes.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import datetime, timedelta

from .timeutils import ensure_utc, utcnow

MIN_LEVEL = 0
MAX_LEVEL = 7

REVIEW_INTERVALS: dict[int, timedelta] = {
    0: timedelta(minutes=10),
    1: timedelta(hours=1),
    2: timedelta(days=1),
    3: timedelta(days=7),
    4: timedelta(days=14),
    5: timedelta(days=30),
    6: timedelta(days=60),
    7: timedelta(days=180),
}

INTERVAL_DESCRIPTIONS: dict[int, str] = {
    0: "10 minutes",
    1: "1 hour",
    2: "1 day",
    3: "1 week",
    4: "2 weeks",
    5: "1 month",
    6: "2 months",
    7: "6 months",
}


@dataclass(frozen=True)
class ReviewUpdate:
    """Result of applying one review outcome to a mastery level."""

    new_level: int
    next_due_at: datetime

    def __iter__(self):
        return iter(astuple(self))


def clamp_level(level: int) -> int:
    """Clamp any integer into the valid mastery range."""
    return max(MIN_LEVEL, min(level, MAX_LEVEL))


def next_interval(level: int) -> timedelta:
    """
    Get the review interval for a mastery level.

    Any level outside 0..7 (negative included) uses the level-7 interval.
    """
    return REVIEW_INTERVALS.get(level, REVIEW_INTERVALS[MAX_LEVEL])


def interval_description(level: int) -> str:
    """Human-readable label for the interval of a mastery level."""
    return INTERVAL_DESCRIPTIONS.get(level, INTERVAL_DESCRIPTIONS[MAX_LEVEL])


def apply_outcome(
    current_level: int,
    remembered: bool,
    now: datetime | None = None,
    immediate: bool = False,
) -> ReviewUpdate:
    """
    Compute the new mastery level and next due time after a review.

    Args:
        current_level: Level before the review
        remembered: Whether the item was recalled
        now: Reference time (defaults to current UTC time)
        immediate: Schedule the next review at ``now`` instead of after the
            level's interval (level transition is unchanged)

    Returns:
        ReviewUpdate with (new_level, next_due_at)
    """
    now = ensure_utc(now) if now is not None else utcnow()

    if remembered:
        new_level = min(current_level + 1, MAX_LEVEL)
    else:
        new_level = max(current_level - 1, MIN_LEVEL)
    new_level = clamp_level(new_level)

    if immediate:
        return ReviewUpdate(new_level=new_level, next_due_at=now)

    return ReviewUpdate(new_level=new_level, next_due_at=now + next_interval(new_level))
