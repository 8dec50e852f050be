"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordbook.config import Settings  # noqa: E402
from wordbook.db.database import create_db_engine  # noqa: E402
from wordbook.review import ReviewRecordStore, SettingsRepository  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_db_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture
def app_settings():
    """Settings independent of the environment and any .env file."""
    return Settings(_env_file=None, database_url="sqlite://", timezone=None)


@pytest.fixture
def store(engine):
    return ReviewRecordStore(engine)


@pytest.fixture
def settings_repo(engine, app_settings):
    return SettingsRepository(engine, settings=app_settings)


@pytest.fixture
def t0():
    """A fixed reference instant (Wednesday 2025-01-15 12:00 UTC)."""
    return datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
