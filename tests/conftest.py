"""
Pytest configuration for the greeting store.

Provides fixtures for:
- Settings isolation (no cached settings leak between tests)
- Per-test SQLite database files
- A controllable clock so tests can place greetings on chosen dates
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest

from greetings.config import Settings, get_settings
from greetings.store import GreetingStore

DEFAULT_MOMENT = datetime(2024, 1, 1, 9, 30, 0)


class FakeClock:
    """Callable clock returning a settable moment."""

    def __init__(self, moment: datetime = DEFAULT_MOMENT) -> None:
        self.moment = moment
        self.calls = 0

    def set(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        self.calls += 1
        return self.moment


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """
    Clear the cached Settings around every test so env overrides apply.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        db_path=str(tmp_path / "settings.db"),
        busy_timeout_seconds=2.0,
        connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """
    Path of a fresh SQLite database file for a single test.
    """
    return str(tmp_path / "greetings.db")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(db_path: str, clock: FakeClock) -> Generator[GreetingStore, None, None]:
    """
    File-backed store with a controllable clock.
    """
    with GreetingStore(db_path, clock=clock, attempts=1) as greeting_store:
        yield greeting_store


@pytest.fixture
def memory_store(clock: FakeClock) -> Generator[GreetingStore, None, None]:
    """
    In-memory store sharing one connection.
    """
    with GreetingStore(":memory:", clock=clock, attempts=1) as greeting_store:
        yield greeting_store
