from __future__ import annotations

import sqlite3

import pytest

from greetings.infrastructure import db_factory
from greetings.infrastructure.db_factory import connection, ensure_schema, open_connection

FLAKY_FAILURES = 2


class _FlakyConnect:
    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0

    def __call__(self, db_path: str, timeout: float) -> sqlite3.Connection:
        self.calls += 1
        if self.calls <= self.failures:
            raise sqlite3.OperationalError("database is locked")
        return sqlite3.connect(db_path)


def test_open_connection_retries_operational_errors(monkeypatch: pytest.MonkeyPatch):
    flaky = _FlakyConnect(FLAKY_FAILURES)
    monkeypatch.setattr(db_factory, "_connect", flaky)

    conn = open_connection(":memory:", timeout=1.0, attempts=FLAKY_FAILURES + 1)
    conn.close()

    assert flaky.calls == FLAKY_FAILURES + 1


def test_open_connection_gives_up_after_attempts(monkeypatch: pytest.MonkeyPatch):
    flaky = _FlakyConnect(failures=10)
    monkeypatch.setattr(db_factory, "_connect", flaky)

    with pytest.raises(sqlite3.OperationalError):
        open_connection(":memory:", timeout=1.0, attempts=2)

    assert flaky.calls == 2


def test_open_connection_sets_busy_timeout():
    with connection(":memory:", timeout=1.5, attempts=1) as conn:
        (busy_ms,) = conn.execute("PRAGMA busy_timeout").fetchone()

    assert busy_ms == 1500


def test_ensure_schema_is_idempotent_and_enables_wal(db_path: str):
    with connection(db_path, attempts=1) as conn:
        ensure_schema(conn, db_path)
        conn.execute(
            "INSERT INTO greetings (first_name, last_name, message, timestamp) VALUES (?, ?, ?, ?)",
            ("Ann", "Lee", "hi", "2024-01-01 00:00:00"),
        )
        conn.commit()
        ensure_schema(conn, db_path)

        (count,) = conn.execute("SELECT COUNT(*) FROM greetings").fetchone()
        (journal_mode,) = conn.execute("PRAGMA journal_mode").fetchone()

    assert count == 1
    assert journal_mode == "wal"
