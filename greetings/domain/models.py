"""
Domain models for the greeting store.

Defines the stored greeting record aligned with the `greetings` table, the
search filter accepted by the store, and the text contracts (confirmation
message, timestamp format) fixed at insert time.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from greetings.domain.errors import InvalidFilter

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

FILTER_FIELDS = ("first_name", "last_name", "start_date", "end_date")


def confirmation_message(first_name: str, last_name: str) -> str:
    """Text stored with every greeting to confirm it was recorded."""
    return f"Thank you, {first_name} {last_name}! Your greeting has been recorded."


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


class Record(BaseModel):
    """
    Representation of a single row in the `greetings` table.
    """

    id: int = Field(..., description="Store-assigned primary key (AUTOINCREMENT).")
    first_name: str = Field(..., description="Greeter's first name.")
    last_name: str = Field(..., description="Greeter's last name.")
    message: str = Field(..., description="Confirmation text computed at insert time.")
    timestamp: str = Field(..., description="Insert time as YYYY-MM-DD HH:MM:SS.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @classmethod
    def from_row(cls, row: Any) -> "Record":
        """Build a record from an (id, first_name, last_name, message, timestamp) row."""
        return cls(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            message=row[3],
            timestamp=row[4],
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready representation used by transports."""
        return self.model_dump()


class GreetingFilter(BaseModel):
    """
    Optional search criteria. Unset fields do not constrain the search.

    Date bounds stay raw strings here; the predicate builder parses them so
    that a malformed date surfaces as `InvalidFilter`.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator("first_name", "last_name", "start_date", "end_date", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        # Empty form fields arrive as "".
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "GreetingFilter":
        """
        Build a filter from request query parameters.

        Raises
        ------
        InvalidFilter
            If a key is not a filter field or a value is not a string.
        """
        for key, value in params.items():
            if key not in FILTER_FIELDS:
                raise InvalidFilter(str(key), str(value), f"Unknown filter field: {key}")
        try:
            return cls(**params)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "filter"
            raise InvalidFilter(
                field, str(params.get(field)), f"Invalid {field}: {error['msg']}"
            ) from exc

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in FILTER_FIELDS)


__all__ = [
    "DATE_FORMAT",
    "TIMESTAMP_FORMAT",
    "GreetingFilter",
    "Record",
    "confirmation_message",
    "format_timestamp",
]
