"""
Background review checker.

Runs ``DueItemScheduler.evaluate_once`` on a fixed interval in a daemon
thread while the application is active. Stopping waits for the current
tick to finish so no store transaction is left half-applied.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from wordbook.core.policies import NotificationPolicy
from wordbook.core.timeutils import utcnow

from .checker import DueItemScheduler


@dataclass
class CheckerStatus:
    """Current background checker status."""

    is_running: bool = False
    is_checking: bool = False
    last_check_at: datetime | None = None
    last_fired_policy: NotificationPolicy | None = None
    total_checks: int = 0
    total_notifications: int = 0
    error_message: str | None = None


@dataclass
class BackgroundReviewChecker:
    """
    Periodic driver for the review checker.

    Usage:
        checker = BackgroundReviewChecker(scheduler, interval_seconds=60)
        checker.start()
        # ... application runs ...
        checker.stop()
    """

    scheduler: DueItemScheduler
    interval_seconds: float = 60.0
    clock: Callable[[], datetime] = utcnow

    # Internal state
    _status: CheckerStatus = field(default_factory=CheckerStatus)
    _thread: threading.Thread | None = field(default=None, repr=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _tick_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def status(self) -> CheckerStatus:
        return self._status

    def start(self) -> None:
        """Start the background thread (no-op if already running or still stopping)."""
        if self._status.is_running:
            logger.debug("Background review checker already running")
            return

        if self._thread is not None and self._thread.is_alive():
            logger.warning("Previous review checker loop is still stopping; not starting")
            return

        self._stop_event.clear()
        self._status.is_running = True
        self._thread = threading.Thread(
            target=self._check_loop,
            name="wordbook-review-checker",
            daemon=True,
        )
        self._thread.start()

        logger.info("Background review checker started (interval: {}s)", self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop issuing ticks and wait for an in-flight tick to complete.

        If the thread is still alive after ``timeout`` it is kept so that
        ``start()`` refuses to launch a second loop until it has exited.
        """
        thread = self._thread
        if not self._status.is_running and thread is None:
            return

        logger.info("Stopping background review checker...")
        self._stop_event.set()

        if thread is not None and thread.is_alive():
            thread.join(timeout=timeout)

        self._status.is_running = False
        if thread is not None and thread.is_alive():
            logger.warning("Background review checker still finishing a tick after {}s", timeout)
            return

        self._thread = None
        logger.info("Background review checker stopped")

    def check_now(self) -> NotificationPolicy | None:
        """Run one check synchronously."""
        return self._do_check()

    def _check_loop(self) -> None:
        while not self._stop_event.is_set():
            self._do_check()

            # Wait for interval or stop event
            if self._stop_event.wait(timeout=self.interval_seconds):
                break

    def _do_check(self) -> NotificationPolicy | None:
        with self._tick_lock:
            self._status.is_checking = True
            fired: NotificationPolicy | None = None
            try:
                fired = self.scheduler.evaluate_once(self.clock())
                self._status.error_message = None
            except Exception as exc:
                logger.error("Error during review check: {}", exc)
                self._status.error_message = str(exc)
            finally:
                self._status.is_checking = False
                self._status.last_check_at = self.clock()
                self._status.total_checks += 1

            if fired is not None:
                self._status.last_fired_policy = fired
                self._status.total_notifications += 1
            return fired
