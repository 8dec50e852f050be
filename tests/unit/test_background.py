"""Unit tests for BackgroundReviewChecker."""

import threading
from datetime import UTC, datetime
from unittest.mock import MagicMock

from wordbook.core.policies import NotificationPolicy
from wordbook.review.background import BackgroundReviewChecker

NOW = datetime(2025, 1, 15, 12, tzinfo=UTC)


def make_checker(scheduler, interval=60.0):
    return BackgroundReviewChecker(scheduler, interval_seconds=interval, clock=lambda: NOW)


def test_check_now_runs_one_pass():
    scheduler = MagicMock()
    scheduler.evaluate_once.return_value = NotificationPolicy.DAILY
    checker = make_checker(scheduler)

    assert checker.check_now() is NotificationPolicy.DAILY

    scheduler.evaluate_once.assert_called_once_with(NOW)
    assert checker.status.total_checks == 1
    assert checker.status.total_notifications == 1
    assert checker.status.last_fired_policy is NotificationPolicy.DAILY
    assert checker.status.last_check_at == NOW


def test_tick_errors_are_logged_not_raised():
    scheduler = MagicMock()
    scheduler.evaluate_once.side_effect = RuntimeError("boom")
    checker = make_checker(scheduler)

    assert checker.check_now() is None
    assert checker.status.error_message == "boom"
    assert checker.status.total_checks == 1


def test_start_ticks_immediately_and_stop_joins():
    ticked = threading.Event()
    scheduler = MagicMock()
    scheduler.evaluate_once.side_effect = lambda now: ticked.set()
    checker = make_checker(scheduler, interval=3600)

    checker.start()
    try:
        assert ticked.wait(timeout=5)
        assert checker.status.is_running
    finally:
        checker.stop(timeout=5)

    assert not checker.status.is_running
    assert checker._thread is None


def test_start_is_idempotent():
    scheduler = MagicMock()
    scheduler.evaluate_once.return_value = None
    checker = make_checker(scheduler, interval=3600)

    checker.start()
    first_thread = checker._thread
    checker.start()
    try:
        assert checker._thread is first_thread
    finally:
        checker.stop(timeout=5)


def test_stop_waits_for_in_flight_tick():
    started = threading.Event()
    release = threading.Event()
    finished = threading.Event()

    def slow_tick(now):
        started.set()
        release.wait(timeout=5)
        finished.set()

    scheduler = MagicMock()
    scheduler.evaluate_once.side_effect = slow_tick
    checker = make_checker(scheduler, interval=3600)

    checker.start()
    assert started.wait(timeout=5)

    stopper = threading.Thread(target=checker.stop)
    stopper.start()
    release.set()
    stopper.join(timeout=5)

    assert finished.is_set()
    assert not checker.status.is_running


def test_stop_when_not_running_is_noop():
    checker = make_checker(MagicMock())
    checker.stop()
    assert not checker.status.is_running


def test_restart_refused_while_previous_loop_is_alive():
    started = threading.Event()
    release = threading.Event()
    ticking_threads = set()

    def slow_tick(now):
        ticking_threads.add(threading.get_ident())
        started.set()
        release.wait(timeout=5)

    scheduler = MagicMock()
    scheduler.evaluate_once.side_effect = slow_tick
    checker = make_checker(scheduler, interval=3600)

    checker.start()
    assert started.wait(timeout=5)

    checker.stop(timeout=0.01)
    first_thread = checker._thread
    assert first_thread is not None and first_thread.is_alive()
    assert not checker.status.is_running

    checker.start()
    assert checker._thread is first_thread
    assert not checker.status.is_running

    release.set()
    checker.stop(timeout=5)
    assert checker._thread is None
    assert not first_thread.is_alive()
    assert len(ticking_threads) == 1

    checker.start()
    try:
        assert checker.status.is_running
        assert checker._thread is not first_thread
    finally:
        checker.stop(timeout=5)
