"""
Greeting store - durable, concurrency-safe persistence for greeting submissions.

This package records greeting events in SQLite and answers three kinds of
queries for the request-handling layer in front of it:

- List every recorded greeting
- Clear all greetings
- Search greetings by exact name and inclusive date range

A single `GreetingStore` instance is meant to be shared by all request
threads; it serializes writes and keeps every user value in bound parameters.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from greetings.config import Settings, get_settings
from greetings.domain.errors import (
    GreetingStoreError,
    InvalidFilter,
    InvalidInput,
    StorageFailure,
)
from greetings.domain.models import GreetingFilter, Record, confirmation_message
from greetings.query.predicates import build_conditions, build_search_query
from greetings.store import GreetingStore
from greetings.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Store
    "GreetingStore",
    # Domain
    "GreetingFilter",
    "Record",
    "confirmation_message",
    # Errors
    "GreetingStoreError",
    "InvalidFilter",
    "InvalidInput",
    "StorageFailure",
    # Query building
    "build_conditions",
    "build_search_query",
    # Logging
    "configure_logging",
    "get_logger",
]
