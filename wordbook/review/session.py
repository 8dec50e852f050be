"""
Review session: walks a snapshot of due items one at a time.

Flow per item:

    QUESTION --record_decision()--> ANSWER --advance()--> QUESTION (next item)
                                                     +--> COMPLETED (last item)

A decision is held as a pending outcome and only written to the store when
the session advances, so the user can change their mind while the answer is
shown and an interrupted session loses at most the current decision.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from loguru import logger

from wordbook.core.errors import (
    EmptySessionError,
    ReviewRecordNotFoundError,
    SessionCompletedError,
)
from wordbook.core.timeutils import utcnow

from .state_store import ReviewRecordStore


class ReviewOutcome(str, Enum):
    """User decision for one item."""

    REMEMBERED = "remembered"
    FORGOTTEN = "forgotten"
    SKIPPED = "skipped"

    @property
    def remembered(self) -> bool | None:
        """True/False for graded outcomes, None for a skip."""
        return {
            ReviewOutcome.REMEMBERED: True,
            ReviewOutcome.FORGOTTEN: False,
            ReviewOutcome.SKIPPED: None,
        }[self]


class SessionPhase(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PendingOutcome:
    """A recorded but not yet committed decision."""

    item_id: str
    outcome: ReviewOutcome


@dataclass
class SessionSummary:
    """Counts for the end-of-session screen."""

    total: int = 0
    remembered: int = 0
    forgotten: int = 0
    skipped: int = 0
    failed_commits: int = 0

    @property
    def reviewed(self) -> int:
        return self.remembered + self.forgotten


class ReviewSession:
    """
    In-memory state machine over an immutable list of due items.

    Items can be ReviewRecords or any object with an ``item_id`` attribute.
    The list is never re-queried mid-session even if the store changes.
    """

    def __init__(self, store: ReviewRecordStore):
        self.store = store
        self._items: tuple[Any, ...] = ()
        self._current_index = 0
        self._phase = SessionPhase.COMPLETED
        self._pending: PendingOutcome | None = None
        self._summary = SessionSummary()

    @classmethod
    def from_store(cls, store: ReviewRecordStore, as_of: datetime | None = None) -> ReviewSession:
        """
        Create a session over everything due at ``as_of``.

        Raises:
            EmptySessionError: If nothing is due
        """
        session = cls(store)
        session.start(store.get_due_items(as_of))
        return session

    # =========================================================================
    # State
    # =========================================================================

    @property
    def items(self) -> tuple[Any, ...]:
        return self._items

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def pending_outcome(self) -> PendingOutcome | None:
        return self._pending

    @property
    def is_completed(self) -> bool:
        return self._phase is SessionPhase.COMPLETED

    @property
    def remaining_count(self) -> int:
        """Items not yet advanced past, including the current one."""
        if self.is_completed:
            return 0
        return len(self._items) - self._current_index

    def current_item(self) -> Any | None:
        if self.is_completed:
            return None
        return self._items[self._current_index]

    def summary(self) -> SessionSummary:
        return SessionSummary(**vars(self._summary))

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self, items: Sequence[Any]) -> None:
        """
        Begin a session over a snapshot of items.

        Raises:
            EmptySessionError: If ``items`` is empty (the session stays completed)
        """
        self._items = tuple(items)
        self._current_index = 0
        self._pending = None
        self._summary = SessionSummary(total=len(self._items))

        if not self._items:
            self._phase = SessionPhase.COMPLETED
            raise EmptySessionError("No words found for review")

        self._phase = SessionPhase.QUESTION
        logger.info("Review session started with {} items", len(self._items))

    def record_decision(self, outcome: ReviewOutcome) -> PendingOutcome:
        """
        Record a decision for the current item and reveal the answer.

        Replaces any earlier decision for the same item. Nothing is written
        to the store until ``advance()``.
        """
        item = self.current_item()
        if item is None:
            raise SessionCompletedError("Review session is already completed")

        self._pending = PendingOutcome(item_id=item.item_id, outcome=ReviewOutcome(outcome))
        self._phase = SessionPhase.ANSWER
        logger.debug("Prepared {} for {}", self._pending.outcome.value, item.item_id)
        return self._pending

    def advance(self, now: datetime | None = None) -> bool:
        """
        Commit the pending decision and move to the next item.

        Returns:
            True if there is a next item, False once the session is completed
        """
        if self.is_completed:
            return False

        pending, self._pending = self._pending, None
        if pending is not None:
            self._commit(pending, now)

        if self._current_index >= len(self._items) - 1:
            self._phase = SessionPhase.COMPLETED
            logger.info(
                "Review session completed: {} remembered, {} forgotten, {} skipped",
                self._summary.remembered,
                self._summary.forgotten,
                self._summary.skipped,
            )
            return False

        self._current_index += 1
        self._phase = SessionPhase.QUESTION
        return True

    def _commit(self, pending: PendingOutcome, now: datetime | None) -> None:
        remembered = pending.outcome.remembered
        if remembered is None:
            self._summary.skipped += 1
            logger.debug("Skipped {}", pending.item_id)
            return

        try:
            self.store.apply_review_outcome(pending.item_id, remembered, now or utcnow())
        except ReviewRecordNotFoundError:
            self._summary.failed_commits += 1
            logger.warning("Item {} no longer exists; dropping its review result", pending.item_id)
            return
        except Exception as exc:
            self._summary.failed_commits += 1
            logger.error("Error applying review result for {}: {}", pending.item_id, exc)
            return

        if remembered:
            self._summary.remembered += 1
        else:
            self._summary.forgotten += 1
