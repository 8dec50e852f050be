"""
SQLite/SQLAlchemy state store for review scheduling.

Provides durable persistence for:
- Mastery level per learned item
- Last-reviewed and next-due timestamps
- Review counts for the summary screen

Every public operation runs in its own transaction. Mastery level and
next-due time are only ever written together, by ``apply_review_outcome``.

Default database location: ~/.wordbook/wordbook.db
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy import Engine, func, or_, select
from sqlalchemy.exc import IntegrityError

from wordbook.core.errors import ReviewRecordNotFoundError
from wordbook.core.review_calculator import (
    MAX_LEVEL,
    MIN_LEVEL,
    apply_outcome,
    interval_description,
    next_interval,
)
from wordbook.core.timeutils import ensure_utc, to_naive_utc, utcnow
from wordbook.db.database import get_engine, get_session_factory, init_db, session_scope
from wordbook.db.models import ReviewRecordRow

# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class ReviewRecord:
    """Scheduling state for a single learned item."""

    item_id: str
    mastery_level: int = MIN_LEVEL
    last_reviewed_at: datetime | None = None
    next_due_at: datetime | None = None
    review_count: int = 0
    created_at: datetime | None = None

    def is_due(self, as_of: datetime | None = None) -> bool:
        """Check if this item is due for review."""
        if self.next_due_at is None:
            return True  # Never scheduled = due
        as_of = ensure_utc(as_of) if as_of is not None else utcnow()
        return self.next_due_at <= as_of

    @property
    def interval_description(self) -> str:
        return interval_description(self.mastery_level)


def _due_clause(as_of: datetime):
    return or_(
        ReviewRecordRow.next_due_at.is_(None),
        ReviewRecordRow.next_due_at <= to_naive_utc(as_of),
    )


def _aware(value: datetime | None) -> datetime | None:
    return ensure_utc(value) if value is not None else None


# =============================================================================
# State Store
# =============================================================================


class ReviewRecordStore:
    """
    SQLAlchemy-backed persistence for review records.

    Handles:
    - Due-item queries and counts for the checker and review sessions
    - Transactional apply-outcome updates
    - Idempotent record creation when an item enters the learning set
    """

    def __init__(self, engine: Engine | None = None, create_tables: bool = True):
        """
        Initialize the state store.

        Args:
            engine: SQLAlchemy engine (defaults to the configured database)
            create_tables: Create missing tables on startup
        """
        self.engine = engine or get_engine()
        self._session_factory = get_session_factory(self.engine)
        # Serializes writers inside this process; the DB transaction covers the rest
        self._write_lock = threading.RLock()

        if create_tables:
            init_db(self.engine)

        logger.debug("ReviewRecordStore initialized at {}", self.engine.url)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_record(self, item_id: str) -> ReviewRecord | None:
        """Get the review record for an item, or None if it was never added."""
        with session_scope(self._session_factory) as session:
            row = session.get(ReviewRecordRow, item_id)
            return self._to_record(row) if row is not None else None

    def get_due_items(self, as_of: datetime | None = None) -> list[ReviewRecord]:
        """
        Get every record due at ``as_of``.

        Records that were never scheduled count as due. Results are ordered
        by item id so they can be used directly as a session snapshot.
        """
        as_of = as_of or utcnow()
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(ReviewRecordRow)
                .where(_due_clause(as_of))
                .order_by(ReviewRecordRow.item_id)
            ).all()
            return [self._to_record(row) for row in rows]

    def count_due(self, as_of: datetime | None = None) -> int:
        """Count records due at ``as_of``."""
        as_of = as_of or utcnow()
        with session_scope(self._session_factory) as session:
            return session.scalar(
                select(func.count()).select_from(ReviewRecordRow).where(_due_clause(as_of))
            ) or 0

    def get_review_stats(self, as_of: datetime | None = None) -> dict[str, int]:
        """Get totals, due count and per-level counts."""
        as_of = as_of or utcnow()
        stats = {"total": 0, "due": 0}
        stats.update({f"level_{level}": 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)})

        with session_scope(self._session_factory) as session:
            rows = session.execute(
                select(ReviewRecordRow.mastery_level, func.count()).group_by(
                    ReviewRecordRow.mastery_level
                )
            ).all()

        for level, count in rows:
            stats["total"] += count
            level_key = f"level_{level}"
            if level_key in stats:
                stats[level_key] += count

        stats["due"] = self.count_due(as_of)
        return stats

    # =========================================================================
    # Mutations
    # =========================================================================

    def initialize_if_absent(self, item_id: str, now: datetime | None = None) -> ReviewRecord:
        """
        Create a level-0 record for a newly learned item.

        Returns the existing record unchanged if the item is already tracked.
        """
        now = ensure_utc(now) if now is not None else utcnow()

        with self._write_lock:
            try:
                with session_scope(self._session_factory) as session:
                    row = session.get(ReviewRecordRow, item_id)
                    if row is not None:
                        return self._to_record(row)

                    row = ReviewRecordRow(
                        item_id=item_id,
                        mastery_level=MIN_LEVEL,
                        last_reviewed_at=None,
                        next_due_at=to_naive_utc(now + next_interval(MIN_LEVEL)),
                        review_count=0,
                        created_at=to_naive_utc(now),
                    )
                    session.add(row)
                    session.flush()
                    record = self._to_record(row)
            except IntegrityError:
                # Another process inserted the same item first
                existing = self.get_record(item_id)
                if existing is None:
                    raise
                return existing

        logger.debug("Initialized review record for {} (due {})", item_id, record.next_due_at)
        return record

    def apply_review_outcome(
        self,
        item_id: str,
        remembered: bool,
        now: datetime | None = None,
    ) -> ReviewRecord:
        """
        Apply one review outcome atomically.

        The previous next-due time becomes ``last_reviewed_at`` (falling back
        to ``now`` if the item was never scheduled), then level and next-due
        are recomputed and written in the same transaction.

        Raises:
            ReviewRecordNotFoundError: If the item has no record (nothing written)
        """
        now = ensure_utc(now) if now is not None else utcnow()

        with self._write_lock, session_scope(self._session_factory) as session:
            row = session.scalars(
                select(ReviewRecordRow)
                .where(ReviewRecordRow.item_id == item_id)
                .with_for_update()
            ).one_or_none()
            if row is None:
                raise ReviewRecordNotFoundError(item_id)

            # Capture before overwriting: a late review must not look on time
            last_reviewed_at = row.next_due_at if row.next_due_at is not None else to_naive_utc(now)
            previous_level = row.mastery_level
            new_level, next_due_at = apply_outcome(previous_level, remembered, now)

            row.mastery_level = new_level
            row.next_due_at = to_naive_utc(next_due_at)
            row.last_reviewed_at = last_reviewed_at
            row.review_count = (row.review_count or 0) + 1
            session.flush()
            record = self._to_record(row)

        logger.debug(
            "Recorded review for {}: remembered={}, level {} -> {}, next_due={}",
            item_id,
            remembered,
            previous_level,
            record.mastery_level,
            record.next_due_at,
        )
        return record

    def close(self) -> None:
        """Wait for in-flight writes, then release database connections."""
        with self._write_lock:
            self.engine.dispose()

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _to_record(row: ReviewRecordRow) -> ReviewRecord:
        return ReviewRecord(
            item_id=row.item_id,
            mastery_level=row.mastery_level,
            last_reviewed_at=_aware(row.last_reviewed_at),
            next_due_at=_aware(row.next_due_at),
            review_count=row.review_count or 0,
            created_at=_aware(row.created_at),
        )
