"""
Database connection factory utilities for the greeting store.

Opens SQLite connections with the pragmas the store relies on and owns the
idempotent schema DDL. Opening a connection is retried with tenacity because a
freshly created database file can be briefly locked by another process running
its own schema setup.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Generator, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from greetings.config import get_settings
from greetings.utils.logging import get_logger

log = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS greetings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT,
    last_name TEXT,
    message TEXT,
    timestamp TEXT
)
"""


def is_memory_database(db_path: str | Path) -> bool:
    return str(db_path) == MEMORY_DATABASE


def _connect(db_path: str, timeout: float) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    try:
        conn.execute(f"PRAGMA busy_timeout = {int(timeout * 1000)}")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def open_connection(
    db_path: str | Path,
    timeout: Optional[float] = None,
    attempts: Optional[int] = None,
) -> sqlite3.Connection:
    """
    Open a SQLite connection with automatic retry.

    Retries with exponential backoff on `sqlite3.OperationalError` (locked or
    temporarily unavailable database file).

    Parameters
    ----------
    db_path : str | Path
        Database file path, or ":memory:" for a private in-memory database.
    timeout : float | None
        Seconds to wait on a locked database. Defaults to settings.
    attempts : int | None
        Total connection attempts. Defaults to settings.

    Returns
    -------
    sqlite3.Connection
        A connection usable from any thread (callers serialize access).

    Raises
    ------
    sqlite3.OperationalError
        If the connection still fails after all retry attempts.
    """
    settings = get_settings()
    effective_timeout = timeout if timeout is not None else settings.busy_timeout_seconds
    effective_attempts = attempts if attempts is not None else settings.connect_attempts

    connect = retry(
        stop=stop_after_attempt(effective_attempts),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(sqlite3.OperationalError),
        reraise=True,
    )(_connect)
    return connect(str(db_path), effective_timeout)


def ensure_schema(conn: sqlite3.Connection, db_path: str | Path) -> None:
    """
    Create the greetings table if it does not exist.

    Safe to call repeatedly; existing rows are untouched. File databases are
    switched to WAL so readers never block on (or observe) a write in progress.
    """
    if not is_memory_database(db_path):
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(SCHEMA_SQL)
    conn.commit()
    log.info("Greetings schema ready", extra={"db_path": str(db_path)})


@contextmanager
def connection(
    db_path: str | Path,
    timeout: Optional[float] = None,
    attempts: Optional[int] = None,
) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager yielding a dedicated connection that is closed on exit.

    Example
    -------
        with connection("greetings.db") as conn:
            conn.execute("SELECT 1")
    """
    with closing(open_connection(db_path, timeout=timeout, attempts=attempts)) as conn:
        yield conn


__all__ = [
    "MEMORY_DATABASE",
    "SCHEMA_SQL",
    "connection",
    "ensure_schema",
    "is_memory_database",
    "open_connection",
]
