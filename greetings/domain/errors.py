"""
Error taxonomy for the greeting store.

Callers map `client_error` errors to a rejected request and everything else to
a generic server error.
"""
from __future__ import annotations


class GreetingStoreError(Exception):
    """Base class for every error raised by the greeting store."""

    client_error: bool = False


class InvalidInput(GreetingStoreError):
    """A required insert field was missing or empty."""

    client_error = True

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} is required")


class InvalidFilter(GreetingStoreError):
    """A search filter value could not be parsed."""

    client_error = True

    def __init__(self, field: str, value: str, message: str | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid {field} format. Use YYYY-MM-DD.")


class StorageFailure(GreetingStoreError):
    """
    The backing database could not complete a read or write.

    The driver exception is kept as `__cause__`; the message itself stays
    generic so it can be shown to callers without leaking storage details.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Could not {operation} greetings")


__all__ = [
    "GreetingStoreError",
    "InvalidInput",
    "InvalidFilter",
    "StorageFailure",
]
