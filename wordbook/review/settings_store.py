"""
Notification settings persisted in the ``app_settings`` key-value table.

Keys:
    notification_permission_enabled            global on/off (default on)
    notification_freq_enabled_<suffix>         per-policy on/off (default off)
    notification_freq_start_time_<suffix>      per-policy "HH:MM" (default 09:00)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from loguru import logger
from sqlalchemy import Engine

from wordbook.config import Settings, get_settings
from wordbook.core.policies import NotificationPolicy, format_start_time, parse_start_time
from wordbook.core.timeutils import to_naive_utc, utcnow
from wordbook.db.database import get_engine, get_session_factory, init_db, session_scope
from wordbook.db.models import AppSetting

NOTIFICATION_PERMISSION_KEY = "notification_permission_enabled"
NOTIFICATION_FREQUENCY_ENABLED_PREFIX = "notification_freq_enabled_"
NOTIFICATION_FREQUENCY_START_TIME_PREFIX = "notification_freq_start_time_"


@runtime_checkable
class NotificationSettingsSource(Protocol):
    """Settings consumed by the review checker."""

    def is_notification_permission_enabled(self) -> bool:
        ...

    def is_policy_enabled(self, policy: NotificationPolicy) -> bool:
        ...

    def get_policy_start_time(self, policy: NotificationPolicy) -> str:
        ...


@dataclass(frozen=True)
class PolicySettings:
    """Current configuration of one notification policy."""

    policy: NotificationPolicy
    enabled: bool
    start_time: str


class SettingsRepository:
    """Reads and writes notification preferences."""

    def __init__(self, engine: Engine | None = None, settings: Settings | None = None):
        self.engine = engine or get_engine()
        self.settings = settings or get_settings()
        self._session_factory = get_session_factory(self.engine)
        init_db(self.engine)

    # ------------------------------------------------------------------
    # Global permission
    # ------------------------------------------------------------------

    def is_notification_permission_enabled(self) -> bool:
        """Whether the user allows review notifications at all."""
        return self._get_bool(
            NOTIFICATION_PERMISSION_KEY, self.settings.notifications_enabled_by_default
        )

    def set_notification_permission_enabled(self, enabled: bool) -> None:
        self._set(NOTIFICATION_PERMISSION_KEY, "true" if enabled else "false")
        logger.info("Saved notification permission enabled: {}", enabled)

    # ------------------------------------------------------------------
    # Per-policy settings
    # ------------------------------------------------------------------

    def is_policy_enabled(self, policy: NotificationPolicy) -> bool:
        return self._get_bool(NOTIFICATION_FREQUENCY_ENABLED_PREFIX + policy.key_suffix, False)

    def set_policy_enabled(self, policy: NotificationPolicy, enabled: bool) -> None:
        self._set(
            NOTIFICATION_FREQUENCY_ENABLED_PREFIX + policy.key_suffix,
            "true" if enabled else "false",
        )
        logger.info("Saved policy enabled for {}: {}", policy.name, enabled)

    def get_policy_start_time(self, policy: NotificationPolicy) -> str:
        """Start time as stored. Not validated here; the checker handles bad values."""
        value = self._get(NOTIFICATION_FREQUENCY_START_TIME_PREFIX + policy.key_suffix)
        return value if value is not None else self.settings.default_start_time

    def set_policy_start_time(self, policy: NotificationPolicy, start_time: str) -> None:
        """
        Save a policy start time.

        Raises:
            ConfigurationError: If ``start_time`` is not a valid HH:MM value
        """
        normalized = format_start_time(parse_start_time(start_time))
        self._set(NOTIFICATION_FREQUENCY_START_TIME_PREFIX + policy.key_suffix, normalized)
        logger.info("Saved start time for {}: {}", policy.name, normalized)

    def get_all_policy_settings(self) -> list[PolicySettings]:
        return [
            PolicySettings(
                policy=policy,
                enabled=self.is_policy_enabled(policy),
                start_time=self.get_policy_start_time(policy),
            )
            for policy in NotificationPolicy
        ]

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _get(self, key: str) -> str | None:
        with session_scope(self._session_factory) as session:
            row = session.get(AppSetting, key)
            return row.value if row is not None else None

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._get(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    def _set(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as session:
            row = session.get(AppSetting, key)
            if row is None:
                session.add(AppSetting(key=key, value=value, updated_at=to_naive_utc(utcnow())))
            else:
                row.value = value
                row.updated_at = to_naive_utc(utcnow())
