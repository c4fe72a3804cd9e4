"""
Greeting store: the single owner of the `greetings` table.

Usage:
    from greetings.store import GreetingStore

    with GreetingStore("greetings.db") as store:
        record = store.insert("Ann", "Lee")
        matches = store.search({"first_name": "Ann", "start_date": "2024-01-01"})

Concurrency model
-----------------
One store instance is shared by every request thread. Inserts and clears run
under a per-store exclusive lock, so they are totally ordered and ids grow
strictly across that order. On file databases each read opens its own
connection and relies on SQLite statement atomicity (WAL mode): a read sees the
table either fully before or fully after any write, never in between. An
in-memory database has a single connection, so there reads take the lock too.

The lock covers the SQL statement and its commit only. Turning the returned
records into a response happens after the lock is released, so a response may
describe a table state that a later write has already replaced.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generator, List, Mapping, Optional, Sequence, Union

from greetings.config import Settings, get_settings
from greetings.domain.errors import InvalidInput, StorageFailure
from greetings.domain.models import (
    GreetingFilter,
    Record,
    confirmation_message,
    format_timestamp,
)
from greetings.infrastructure.db_factory import (
    connection,
    ensure_schema,
    is_memory_database,
    open_connection,
)
from greetings.query.predicates import ORDER_BY, SELECT_COLUMNS, build_search_query
from greetings.utils.logging import get_logger

log = get_logger(__name__)

INSERT_SQL = "INSERT INTO greetings (first_name, last_name, message, timestamp) VALUES (?, ?, ?, ?)"
DELETE_ALL_SQL = "DELETE FROM greetings"

FilterLike = Union[GreetingFilter, Mapping[str, Any], None]


def _require(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(field)


class GreetingStore:
    """
    Durable, thread-safe custodian of greeting records.

    Parameters
    ----------
    db_path : str | Path
        SQLite database file, or ":memory:" for a private in-memory table.
    clock : callable | None
        Returns the current local time; used to stamp new greetings.
    timeout : float | None
        Seconds to wait on a locked database file. Defaults to settings.
    attempts : int | None
        Connection attempts before giving up. Defaults to settings.
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = None,
        attempts: Optional[int] = None,
    ) -> None:
        self.db_path = str(db_path)
        self._clock = clock or datetime.now
        self._timeout = timeout
        self._attempts = attempts
        self._lock = threading.Lock()
        self._memory = is_memory_database(self.db_path)
        self._shared: Optional[sqlite3.Connection] = None

        try:
            if self._memory:
                self._shared = self._open()
                ensure_schema(self._shared, self.db_path)
            else:
                with connection(self.db_path, timeout=timeout, attempts=attempts) as conn:
                    ensure_schema(conn, self.db_path)
        except sqlite3.Error as exc:
            log.error(
                "Failed to initialize greetings table",
                extra={"db_path": self.db_path, "error": str(exc)},
            )
            if self._shared is not None:
                self._shared.close()
                self._shared = None
            raise StorageFailure("initialize") from exc

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "GreetingStore":
        """Build a store from configuration (environment / .env by default)."""
        settings = settings or get_settings()
        return cls(
            settings.db_path,
            timeout=settings.busy_timeout_seconds,
            attempts=settings.connect_attempts,
            **kwargs,
        )

    def _open(self) -> sqlite3.Connection:
        return open_connection(self.db_path, timeout=self._timeout, attempts=self._attempts)

    def _shared_connection(self) -> sqlite3.Connection:
        if self._shared is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        return self._shared

    @contextmanager
    def _writer(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            if self._memory:
                yield self._shared_connection()
            else:
                with connection(self.db_path, timeout=self._timeout, attempts=self._attempts) as conn:
                    yield conn

    @contextmanager
    def _reader(self) -> Generator[sqlite3.Connection, None, None]:
        if self._memory:
            with self._lock:
                yield self._shared_connection()
        else:
            with connection(self.db_path, timeout=self._timeout, attempts=self._attempts) as conn:
                yield conn

    def _fetch(self, operation: str, sql: str, params: Sequence[Any] = ()) -> List[Record]:
        try:
            with self._reader() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            log.error(
                f"Failed to {operation} greetings",
                extra={"operation": operation, "error": str(exc)},
            )
            raise StorageFailure(operation) from exc
        return [Record.from_row(row) for row in rows]

    # ── WRITE ─────────────────────────────────────────────

    def insert(self, first_name: str, last_name: str) -> Record:
        """
        Record one greeting and return it fully populated.

        Raises
        ------
        InvalidInput
            If either name is missing or blank.
        StorageFailure
            If the row could not be written; no partial row is left behind.
        """
        _require("first_name", first_name)
        _require("last_name", last_name)
        message = confirmation_message(first_name, last_name)

        try:
            with self._writer() as conn:
                # Stamped under the lock so timestamps follow id order.
                timestamp = format_timestamp(self._clock())
                try:
                    cursor = conn.execute(INSERT_SQL, (first_name, last_name, message, timestamp))
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
                greeting_id = cursor.lastrowid
        except sqlite3.Error as exc:
            log.error("Failed to insert greeting", extra={"error": str(exc)})
            raise StorageFailure("save") from exc

        log.info("Greeting inserted", extra={"greeting_id": greeting_id})
        return Record(
            id=greeting_id,
            first_name=first_name,
            last_name=last_name,
            message=message,
            timestamp=timestamp,
        )

    def clear(self) -> int:
        """
        Delete every greeting in one statement and return how many were removed.

        Raises
        ------
        StorageFailure
            If the delete could not be committed; it is rolled back as a whole.
        """
        try:
            with self._writer() as conn:
                try:
                    removed = conn.execute(DELETE_ALL_SQL).rowcount
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except sqlite3.Error as exc:
            log.error("Failed to clear greetings", extra={"error": str(exc)})
            raise StorageFailure("clear") from exc

        log.info("Greetings cleared", extra={"removed": removed})
        return removed

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> List[Record]:
        """Every stored greeting, ordered by id. Empty list when there are none."""
        return self._fetch("list", SELECT_COLUMNS + ORDER_BY)

    def search(self, criteria: FilterLike = None) -> List[Record]:
        """
        Greetings matching every supplied filter field.

        `criteria` is a `GreetingFilter` or a mapping with any of the keys
        first_name, last_name, start_date, end_date. Without any field set the
        result equals `list_all()`.

        Raises
        ------
        InvalidFilter
            If a key is not a filter field, a value is not a string, or a date
            bound is not a valid YYYY-MM-DD date.
        StorageFailure
            If the query could not be executed.
        """
        if criteria is None:
            criteria = GreetingFilter()
        elif not isinstance(criteria, GreetingFilter):
            criteria = GreetingFilter.from_query(criteria)

        sql, params = build_search_query(criteria)
        results = self._fetch("search", sql, params)
        log.info(
            f"Search returned {len(results)} results",
            extra={"filters": criteria.model_dump(exclude_none=True), "results": len(results)},
        )
        return results

    # ── LIFECYCLE ─────────────────────────────────────────

    def close(self) -> None:
        """Release the shared in-memory connection, if any."""
        with self._lock:
            if self._shared is not None:
                self._shared.close()
                self._shared = None

    def __enter__(self) -> "GreetingStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["GreetingStore", "FilterLike"]
