from datetime import datetime, timedelta

import pytest

from greetings import config
from greetings.store import GreetingStore
from scripts import seed_greetings

EXPECTED_SEED_COUNT = 20
SEED_DAYS = 10
SEED_NOW = datetime(2024, 2, 1, 12, 0, 0)


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("GREETINGS_DB_PATH", "GREETINGS_BUSY_TIMEOUT", "GREETINGS_CONNECT_ATTEMPTS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_settings()

    assert settings.db_path == "greetings.db"
    assert settings.busy_timeout_seconds > 0
    assert settings.connect_attempts >= 1
    assert settings.log_level == "INFO"


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GREETINGS_DB_PATH", "/tmp/other.db")
    monkeypatch.setenv("GREETINGS_CONNECT_ATTEMPTS", "5")

    settings = config.get_settings()

    assert settings.db_path == "/tmp/other.db"
    assert settings.connect_attempts == 5


def test_get_settings_is_cached():
    assert config.get_settings() is config.get_settings()


def test_generate_entries_is_deterministic_and_ordered():
    first = seed_greetings._generate_entries(EXPECTED_SEED_COUNT, SEED_DAYS, 123, SEED_NOW)
    second = seed_greetings._generate_entries(EXPECTED_SEED_COUNT, SEED_DAYS, 123, SEED_NOW)

    assert first == second
    assert len(first) == EXPECTED_SEED_COUNT
    moments = [moment for _, _, moment in first]
    assert moments == sorted(moments)
    assert all(SEED_NOW - timedelta(days=SEED_DAYS) <= moment < SEED_NOW for moment in moments)


def test_seed_store_inserts_requested_count(db_path: str):
    inserted = seed_greetings.seed_store(db_path, count=5, days=3, seed=7, now=SEED_NOW)

    with GreetingStore(db_path) as store:
        records = store.list_all()
    assert inserted == 5
    assert len(records) == 5
    assert [r.timestamp for r in records] == sorted(r.timestamp for r in records)
