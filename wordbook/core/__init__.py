"""Core review rules: mastery ladder, notification cadences, errors."""

from .errors import (
    ConfigurationError,
    EmptySessionError,
    ReviewRecordNotFoundError,
    ReviewSessionError,
    SessionCompletedError,
    WordbookError,
)
from .policies import DEFAULT_START_TIME, NotificationPolicy, format_start_time, parse_start_time
from .review_calculator import (
    MAX_LEVEL,
    MIN_LEVEL,
    ReviewUpdate,
    apply_outcome,
    clamp_level,
    interval_description,
    next_interval,
)

__all__ = [
    # Ladder
    "MIN_LEVEL",
    "MAX_LEVEL",
    "ReviewUpdate",
    "apply_outcome",
    "clamp_level",
    "interval_description",
    "next_interval",
    # Cadences
    "DEFAULT_START_TIME",
    "NotificationPolicy",
    "format_start_time",
    "parse_start_time",
    # Errors
    "WordbookError",
    "ConfigurationError",
    "ReviewRecordNotFoundError",
    "ReviewSessionError",
    "EmptySessionError",
    "SessionCompletedError",
]
