"""Global test fixtures and utilities for wellness dashboard tests"""
import pytest
from datetime import date, datetime, timedelta, timezone

from wellness.db.gateway import InMemoryGateway
from wellness.identity import SessionIdentity
from wellness.services.progress_engine import ProgressEngine


class FakeClock:
    """Controllable calendar date for streak tests"""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


# ============================================================================
# User & Identity Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def identity(test_user_id):
    """Signed-in session for the standard test user"""
    return SessionIdentity(test_user_id)


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def gateway():
    """Fresh in-memory gateway"""
    return InMemoryGateway()


@pytest.fixture
def progress_row_factory(test_user_id):
    """Build raw progress rows for seeding the gateway"""
    def _create(**overrides):
        row = {
            "user_id": test_user_id,
            "level": 1,
            "experience_points": 0,
            "total_tasks_completed": 0,
            "streak_days": 0,
            "last_activity_date": None,
        }
        row.update(overrides)
        return row

    return _create


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Clock frozen on a fixed calendar date"""
    return FakeClock(date(2024, 1, 15))


@pytest.fixture
def frozen_now():
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(gateway, identity, clock, frozen_now):
    """ProgressEngine wired to the in-memory gateway and fake clock"""
    return ProgressEngine(gateway, identity, clock=clock, now=lambda: frozen_now)


@pytest.fixture
def seed_progress(gateway, progress_row_factory):
    """Insert a progress row for the test user"""
    async def _seed(**overrides):
        return await gateway.insert("user_progress", progress_row_factory(**overrides))

    return _seed


# ============================================================================
# Environment & Config Fixtures
# ============================================================================

@pytest.fixture
def test_api_key():
    """Standard test API key"""
    return "test_api_key_12345"


@pytest.fixture
def test_env_vars(monkeypatch, test_api_key):
    """Set standard test environment variables"""
    env_vars = {
        "API_KEYS": test_api_key,
        "STORAGE_BACKEND": "memory",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars
