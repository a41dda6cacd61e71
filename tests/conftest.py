"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from questcore.core.exceptions import PersistenceError  # noqa: E402
from questcore.core.mastery import MasteryEngine  # noqa: E402
from questcore.curriculum import (  # noqa: E402
    CurriculumProgressionEngine,
    CurriculumRepository,
    InMemoryKeyValueStore,
    reference_catalog,
)
from questcore.db.database import Database  # noqa: E402
from questcore.progress import InMemoryProgressRepository, ProgressStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# =============================================================================
# Test doubles
# =============================================================================


class RecordingReporter:
    """Achievement reporter that keeps every report it receives."""

    def __init__(self):
        self.reports = []

    def record_session(self, report):
        self.reports.append(report)


class FlakyProgressRepository(InMemoryProgressRepository):
    """In-memory repository whose saves fail while `failing` is set."""

    def __init__(self, snapshot=None):
        super().__init__(snapshot)
        self.failing = False

    def save(self, snapshot):
        if self.failing:
            raise PersistenceError("disk full")
        super().save(snapshot)


class FlakyKeyValueStore(InMemoryKeyValueStore):
    """In-memory key-value store whose writes fail while `failing` is set."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.failing = False

    def set(self, key, value):
        if self.failing:
            raise PersistenceError("disk full")
        super().set(key, value)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None, log_file=None)


@pytest.fixture
def mastery_engine():
    return MasteryEngine()


@pytest.fixture
def rng():
    """Seeded random source so generated problems are reproducible."""
    return random.Random(1234)


@pytest.fixture
def now():
    """A fixed Monday morning."""
    return datetime(2024, 3, 4, 9, 30)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def progress_repository():
    return FlakyProgressRepository()


@pytest.fixture
def progress_store(progress_repository, reporter, settings):
    return ProgressStore(progress_repository, reporter, settings=settings)


@pytest.fixture
def store_factory(reporter):
    """Build a ProgressStore over a preloaded snapshot and/or custom settings."""

    def _make(snapshot=None, **overrides):
        repository = FlakyProgressRepository(snapshot)
        settings = Settings(_env_file=None, log_file=None, **overrides)
        return ProgressStore(repository, reporter, settings=settings)

    return _make


@pytest.fixture
def catalog():
    return reference_catalog()


@pytest.fixture
def kv_store():
    return FlakyKeyValueStore()


@pytest.fixture
def curriculum_engine(catalog, kv_store, settings):
    return CurriculumProgressionEngine(catalog, CurriculumRepository(kv_store, catalog), settings=settings)


@pytest.fixture
def sqlite_database(tmp_path):
    """File-backed SQLite database with tables created."""
    database = Database(url=f"sqlite:///{tmp_path / 'questcore.db'}", echo=False)
    database.init_db()
    yield database
    database.dispose()
