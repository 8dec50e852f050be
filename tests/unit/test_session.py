"""
Unit tests for ReviewSession.

Tests:
- Start/empty snapshot handling
- Deferred commit of pending outcomes
- Skip performs no store write
- Soft failure when an item disappears mid-session
"""

import warnings
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from wordbook.core.errors import (
    EmptySessionError,
    ReviewRecordNotFoundError,
    SessionCompletedError,
)
from wordbook.review import session as session_module
from wordbook.review.session import (
    PendingOutcome,
    ReviewOutcome,
    ReviewSession,
    SessionPhase,
)


def make_items(*ids):
    return [SimpleNamespace(item_id=item_id) for item_id in ids]


@pytest.fixture
def mock_store():
    return MagicMock()


@pytest.fixture
def session(mock_store):
    return ReviewSession(mock_store)


class TestStart:
    def test_starts_at_first_item_in_question_phase(self, session):
        items = make_items("a", "b", "c")
        session.start(items)

        assert session.current_index == 0
        assert session.phase is SessionPhase.QUESTION
        assert session.current_item() is items[0]
        assert session.pending_outcome is None
        assert session.remaining_count == 3

    def test_empty_snapshot_raises_and_stays_completed(self, session):
        with pytest.raises(EmptySessionError):
            session.start([])

        assert session.is_completed
        assert session.current_item() is None
        assert session.advance() is False

    def test_snapshot_is_immutable_copy(self, session):
        items = make_items("a", "b")
        session.start(items)
        items.append(SimpleNamespace(item_id="c"))

        assert len(session.items) == 2

    def test_restart_resets_state(self, session):
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.REMEMBERED)
        session.start(make_items("x"))

        assert session.current_index == 0
        assert session.pending_outcome is None
        assert session.current_item().item_id == "x"

    def test_from_store_snapshots_due_items(self, mock_store, t0):
        mock_store.get_due_items.return_value = make_items("a")

        session = ReviewSession.from_store(mock_store, t0)

        mock_store.get_due_items.assert_called_once_with(t0)
        assert session.current_item().item_id == "a"


class TestRecordDecision:
    def test_reveals_answer_without_writing(self, session, mock_store):
        session.start(make_items("a", "b"))

        pending = session.record_decision(ReviewOutcome.FORGOTTEN)

        assert pending == PendingOutcome(item_id="a", outcome=ReviewOutcome.FORGOTTEN)
        assert session.phase is SessionPhase.ANSWER
        mock_store.apply_review_outcome.assert_not_called()

    def test_decision_can_be_changed_before_advance(self, session, mock_store, t0):
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.FORGOTTEN)
        session.record_decision(ReviewOutcome.REMEMBERED)

        session.advance(t0)

        mock_store.apply_review_outcome.assert_called_once_with("a", True, t0)

    def test_accepts_plain_values(self, session):
        session.start(make_items("a"))
        assert session.record_decision("skipped").outcome is ReviewOutcome.SKIPPED

    def test_completed_session_rejects_decisions(self, session):
        session.start(make_items("a"))
        session.advance()

        with pytest.raises(SessionCompletedError):
            session.record_decision(ReviewOutcome.REMEMBERED)


class TestAdvance:
    def test_commits_pending_and_moves_on(self, session, mock_store, t0):
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.REMEMBERED)

        assert session.advance(t0) is True

        mock_store.apply_review_outcome.assert_called_once_with("a", True, t0)
        assert session.current_index == 1
        assert session.phase is SessionPhase.QUESTION
        assert session.pending_outcome is None

    def test_last_item_completes(self, session, mock_store):
        session.start(make_items("a"))
        session.record_decision(ReviewOutcome.FORGOTTEN)

        assert session.advance() is False
        assert session.is_completed
        assert session.current_item() is None
        assert session.remaining_count == 0
        assert mock_store.apply_review_outcome.call_args.args[:2] == ("a", False)

    def test_skip_writes_nothing(self, session, mock_store):
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.SKIPPED)
        session.advance()

        mock_store.apply_review_outcome.assert_not_called()
        assert session.summary().skipped == 1

    def test_advance_without_decision_writes_nothing(self, session, mock_store):
        session.start(make_items("a", "b"))
        session.advance()

        mock_store.apply_review_outcome.assert_not_called()
        assert session.current_index == 1

    def test_three_item_walkthrough(self, session, mock_store, t0):
        """Forgotten on 1, advance twice, skip 3, advance -> one write (item 1)."""
        session.start(make_items("one", "two", "three"))

        session.record_decision(ReviewOutcome.FORGOTTEN)
        assert session.advance(t0) is True
        assert session.advance(t0) is True
        session.record_decision(ReviewOutcome.SKIPPED)
        assert session.advance(t0) is False

        mock_store.apply_review_outcome.assert_called_once_with("one", False, t0)
        summary = session.summary()
        assert (summary.total, summary.forgotten, summary.skipped) == (3, 1, 1)

    def test_missing_item_is_soft_failure(self, session, mock_store):
        mock_store.apply_review_outcome.side_effect = ReviewRecordNotFoundError("a")
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.REMEMBERED)

        assert session.advance() is True
        assert session.current_item().item_id == "b"
        assert session.summary().failed_commits == 1
        assert session.summary().remembered == 0

    def test_store_error_discards_pending(self, session, mock_store):
        mock_store.apply_review_outcome.side_effect = RuntimeError("disk I/O error")
        session.start(make_items("a", "b"))
        session.record_decision(ReviewOutcome.FORGOTTEN)

        assert session.advance() is True
        assert session.pending_outcome is None
        assert session.summary().failed_commits == 1


def test_outcome_remembered_flag():
    assert ReviewOutcome.REMEMBERED.remembered is True
    assert ReviewOutcome.FORGOTTEN.remembered is False
    assert ReviewOutcome.SKIPPED.remembered is None


def test_module_compiles_without_warnings():
    path = Path(session_module.__file__)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(path.read_text(encoding="utf-8"), str(path), "exec")
