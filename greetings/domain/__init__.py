"""
Domain package for the greeting store.

Exports the record and filter models plus the error taxonomy. Keep this
package focused on data definitions and validation concerns.
"""

from greetings.domain.errors import (
    GreetingStoreError,
    InvalidFilter,
    InvalidInput,
    StorageFailure,
)
from greetings.domain.models import (
    DATE_FORMAT,
    TIMESTAMP_FORMAT,
    GreetingFilter,
    Record,
    confirmation_message,
    format_timestamp,
)

__all__ = [
    "DATE_FORMAT",
    "TIMESTAMP_FORMAT",
    "GreetingFilter",
    "GreetingStoreError",
    "InvalidFilter",
    "InvalidInput",
    "Record",
    "StorageFailure",
    "confirmation_message",
    "format_timestamp",
]
