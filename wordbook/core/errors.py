"""Exception hierarchy for the review engine."""

from __future__ import annotations


class WordbookError(Exception):
    """Base class for all wordbook errors."""

    pass


class ConfigurationError(WordbookError):
    """Raised when a setting value cannot be used (e.g. a malformed start time)."""

    pass


class ReviewRecordNotFoundError(WordbookError):
    """Raised when a review outcome targets an item with no scheduling record."""

    def __init__(self, item_id: str):
        super().__init__(f"No review record for item '{item_id}'")
        self.item_id = item_id


class ReviewSessionError(WordbookError):
    """Base class for review session misuse."""

    pass


class EmptySessionError(ReviewSessionError):
    """Raised when a review session is started with nothing to review."""

    pass


class SessionCompletedError(ReviewSessionError):
    """Raised when a decision is recorded on a finished session."""

    pass
