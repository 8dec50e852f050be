"""
Wordbook: spaced-repetition review engine for a vocabulary flashcard app.

Components:
- review_calculator: Fixed mastery ladder (levels 0-7) and interval lookup
- ReviewRecordStore: SQLAlchemy persistence for per-item schedules
- DueItemScheduler: Multi-cadence "words are due" notification checker
- BackgroundReviewChecker: Thread that ticks the scheduler
- ReviewSession: Question/reveal/commit state machine over due items
"""

__version__ = "1.0.0"
