"""
Review engine services.

Components:
- ReviewRecordStore: SQLAlchemy persistence for review records
- SettingsRepository: Notification preferences
- DueItemScheduler: Multi-policy "words are due" checker
- BackgroundReviewChecker: Thread that ticks the checker
- ReviewSession: Question/reveal/commit flow over due items
"""

from .background import BackgroundReviewChecker, CheckerStatus
from .checker import DueItemScheduler
from .session import PendingOutcome, ReviewOutcome, ReviewSession, SessionPhase, SessionSummary
from .settings_store import NotificationSettingsSource, PolicySettings, SettingsRepository
from .state_store import ReviewRecord, ReviewRecordStore

__all__ = [
    # Persistence
    "ReviewRecord",
    "ReviewRecordStore",
    "SettingsRepository",
    "NotificationSettingsSource",
    "PolicySettings",
    # Scheduling
    "DueItemScheduler",
    "BackgroundReviewChecker",
    "CheckerStatus",
    # Sessions
    "ReviewSession",
    "ReviewOutcome",
    "PendingOutcome",
    "SessionPhase",
    "SessionSummary",
]
