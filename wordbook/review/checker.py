"""
Review checker: decides when to remind the user that words are due.

Each NotificationPolicy is evaluated independently against wall-clock time:

1. The policy's start time must have passed today (local time)
2. It must not have fired already in the current calendar period
   (daily: same date, weekly: same ISO week, monthly: same month)
3. Weekly policies only fire on Sundays, monthly ones on the 1st
4. Its cooldown since the last firing must have elapsed

The first policy (in declaration order) that passes all checks while words
are due sends the notification and ends the pass, so a tick never produces
more than one notification. A policy that matches while nothing is due still
records the firing so it does not re-check on every tick.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, time, timedelta, tzinfo
from types import MappingProxyType

from loguru import logger

from wordbook.core.errors import ConfigurationError
from wordbook.core.policies import NotificationPolicy, parse_start_time
from wordbook.core.timeutils import ensure_utc, utcnow

from .settings_store import NotificationSettingsSource
from .state_store import ReviewRecordStore

WEEKLY_NOTIFICATION_WEEKDAY = 6  # Sunday (Monday == 0)
MONTHLY_NOTIFICATION_DAY = 1

NotifyCallback = Callable[[int], None]


class DueItemScheduler:
    """
    Evaluates notification policies once per external timer tick.

    The per-policy ``last_fired`` map is owned by this instance and lives only
    as long as the process; a restart re-arms every policy.
    """

    def __init__(
        self,
        store: ReviewRecordStore,
        settings: NotificationSettingsSource,
        notify: NotifyCallback,
        last_fired: dict[NotificationPolicy, datetime] | None = None,
        tz: tzinfo | None = None,
    ):
        """
        Initialize the checker.

        Args:
            store: Source of the due-item count
            settings: Notification preferences
            notify: Called with the due count when a notification should be shown
            last_fired: Initial per-policy firing times (empty by default)
            tz: Zone for start times and calendar periods (None = system local)
        """
        self.store = store
        self.settings = settings
        self.notify = notify
        self.tz = tz
        self._last_fired: dict[NotificationPolicy, datetime] = (
            last_fired if last_fired is not None else {}
        )

    @property
    def last_fired(self) -> Mapping[NotificationPolicy, datetime]:
        """Read-only view of the last firing time per policy."""
        return MappingProxyType(self._last_fired)

    def last_fired_at(self, policy: NotificationPolicy) -> datetime | None:
        return self._last_fired.get(policy)

    def evaluate_once(self, now: datetime | None = None) -> NotificationPolicy | None:
        """
        Run one check pass.

        Args:
            now: Evaluation time (defaults to current UTC time)

        Returns:
            The policy that sent a notification, or None
        """
        now = ensure_utc(now) if now is not None else utcnow()

        try:
            if not self.settings.is_notification_permission_enabled():
                return None
        except Exception as exc:
            logger.error("Could not read notification permission: {}", exc)
            return None

        local_now = self._to_local(now)
        due_count: int | None = None  # Queried lazily, at most once per pass

        for policy in NotificationPolicy:
            start_time = self._policy_start_time(policy)
            if start_time is None:
                continue

            if not self._should_check_now(policy, start_time, now, local_now):
                continue

            last_fired = self._last_fired.get(policy)
            if last_fired is not None and now - last_fired < policy.cooldown:
                logger.debug(
                    "Cooldown active for {}. Last fired: {}. Skipping.", policy.name, last_fired
                )
                continue

            if due_count is None:
                due_count = self._count_due(now)

            self._last_fired[policy] = now
            if due_count > 0:
                logger.info(
                    "Review check for {}: {} words due. Triggering notification.",
                    policy.name,
                    due_count,
                )
                self._notify(due_count)
                return policy

            logger.debug("Review check for {}: no words due.", policy.name)

        return None

    # =========================================================================
    # Policy evaluation
    # =========================================================================

    def _policy_start_time(self, policy: NotificationPolicy) -> time | None:
        """Start time of an enabled policy, or None if it should be skipped."""
        try:
            if not self.settings.is_policy_enabled(policy):
                return None
            raw = self.settings.get_policy_start_time(policy)
        except Exception as exc:
            logger.error("Could not read settings for {}: {}", policy.name, exc)
            return None

        try:
            return parse_start_time(raw)
        except ConfigurationError as exc:
            logger.warning("Skipping {} this tick: {}", policy.name, exc)
            return None

    def _should_check_now(
        self,
        policy: NotificationPolicy,
        start_time: time,
        now: datetime,
        local_now: datetime,
    ) -> bool:
        scheduled_today = local_now.replace(
            hour=start_time.hour, minute=start_time.minute, second=0, microsecond=0
        )
        scheduled_time_passed = local_now >= scheduled_today

        if not scheduled_time_passed or self._already_notified_this_period(policy, now, local_now):
            return False

        if policy is NotificationPolicy.WEEKLY:
            return local_now.weekday() == WEEKLY_NOTIFICATION_WEEKDAY
        if policy is NotificationPolicy.MONTHLY:
            return local_now.day == MONTHLY_NOTIFICATION_DAY
        return True

    def _already_notified_this_period(
        self,
        policy: NotificationPolicy,
        now: datetime,
        local_now: datetime,
    ) -> bool:
        last_fired = self._last_fired.get(policy)
        if last_fired is None:
            return False

        last_local = self._to_local(last_fired)

        if policy is NotificationPolicy.DAILY:
            return last_local.date() == local_now.date()
        if policy is NotificationPolicy.WEEKLY:
            last_week = last_local.isocalendar()
            this_week = local_now.isocalendar()
            return now - last_fired < timedelta(days=7) and (
                (last_week.year, last_week.week) == (this_week.year, this_week.week)
            )
        if policy is NotificationPolicy.MONTHLY:
            return (last_local.year, last_local.month) == (local_now.year, local_now.month)

        # 15-minute and hourly cadences rely on the cooldown alone
        return False

    # =========================================================================
    # Collaborators
    # =========================================================================

    def _count_due(self, now: datetime) -> int:
        try:
            return self.store.count_due(now)
        except Exception as exc:
            logger.error("Error counting words due for review: {}", exc)
            return 0

    def _notify(self, due_count: int) -> None:
        try:
            self.notify(due_count)
        except Exception as exc:
            logger.warning("Notification callback failed: {}", exc)

    def _to_local(self, value: datetime) -> datetime:
        return ensure_utc(value).astimezone(self.tz)
