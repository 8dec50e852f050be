"""
Notification cadences.

Each policy is an independent "remind me that words are due" schedule. The
member order is significant: the checker evaluates policies in declaration
order and the first one that fires wins the tick.
"""

from __future__ import annotations

import re
from datetime import time, timedelta
from enum import Enum

from .errors import ConfigurationError

DEFAULT_START_TIME = "09:00"

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


class NotificationPolicy(str, Enum):
    """Notification cadence. Values double as settings key suffixes."""

    MINUTES_15 = "15m"
    HOURLY = "1h"
    DAILY = "1d"
    WEEKLY = "1w"
    MONTHLY = "1mo"

    @classmethod
    def from_name(cls, name: str) -> NotificationPolicy:
        """
        Resolve a policy from its member name, key suffix or display name.

        Raises:
            ConfigurationError: If nothing matches
        """
        needle = name.strip().lower()
        for policy in cls:
            if needle in (policy.name.lower(), policy.value, policy.display_name.lower()):
                return policy
        raise ConfigurationError(f"Unknown notification policy: {name!r}")

    @property
    def key_suffix(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Short label for settings screens."""
        return {
            NotificationPolicy.MINUTES_15: "15 Mins",
            NotificationPolicy.HOURLY: "Hourly",
            NotificationPolicy.DAILY: "Daily",
            NotificationPolicy.WEEKLY: "Weekly",
            NotificationPolicy.MONTHLY: "Monthly",
        }[self]

    @property
    def color(self) -> str:
        """Display color (presentation only)."""
        return {
            NotificationPolicy.MINUTES_15: "#00BCD4",
            NotificationPolicy.HOURLY: "#03A9F4",
            NotificationPolicy.DAILY: "#4CAF50",
            NotificationPolicy.WEEKLY: "#FF9800",
            NotificationPolicy.MONTHLY: "#9C27B0",
        }[self]

    @property
    def cooldown(self) -> timedelta:
        """
        Minimum gap between two firings of this policy.

        Set just under the cadence length so one logical period never
        fires twice while the policy still re-arms for the next one.
        """
        return {
            NotificationPolicy.MINUTES_15: timedelta(minutes=14),
            NotificationPolicy.HOURLY: timedelta(minutes=59),
            NotificationPolicy.DAILY: timedelta(hours=23, minutes=55),
            NotificationPolicy.WEEKLY: timedelta(days=6, hours=23),
            NotificationPolicy.MONTHLY: timedelta(days=27),
        }[self]


def parse_start_time(value: str) -> time:
    """
    Parse an ``HH:MM`` start time.

    Raises:
        ConfigurationError: If the string is not a valid 24h time
    """
    match = _TIME_PATTERN.match(value or "")
    if match is None:
        raise ConfigurationError(f"Invalid start time {value!r}, expected HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ConfigurationError(f"Start time out of range: {value!r}")

    return time(hour=hour, minute=minute)


def format_start_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"
