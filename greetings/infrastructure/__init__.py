"""
Infrastructure package for the greeting store.

Centralizes SQLite connectivity and schema setup. Keep this layer focused on
I/O and resource management, decoupled from query assembly and store logic.
"""

from greetings.infrastructure.db_factory import (
    connection,
    ensure_schema,
    is_memory_database,
    open_connection,
)

__all__ = [
    "connection",
    "ensure_schema",
    "is_memory_database",
    "open_connection",
]
