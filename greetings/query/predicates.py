"""
Search predicate construction for the greetings table.

Turns a `GreetingFilter` into a list of SQL conditions and the matching list of
bound parameters. User values only ever travel as parameters; the condition
strings come from a fixed vocabulary below.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional, Tuple

from greetings.domain.errors import InvalidFilter
from greetings.domain.models import DATE_FORMAT, GreetingFilter

SELECT_COLUMNS = "SELECT id, first_name, last_name, message, timestamp FROM greetings"
ORDER_BY = " ORDER BY id"

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_date(field: str, value: str) -> str:
    """
    Validate a YYYY-MM-DD date and return it in canonical form.

    Raises
    ------
    InvalidFilter
        If the value is not shaped like YYYY-MM-DD or is not a calendar date.
    """
    if not _DATE_SHAPE.fullmatch(value):
        raise InvalidFilter(field, value)
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise InvalidFilter(field, value) from exc
    return parsed.strftime(DATE_FORMAT)


def build_conditions(criteria: GreetingFilter) -> Tuple[List[str], List[str]]:
    """
    Translate a filter into AND-ed conditions and their bound parameters.

    Fields are visited in a fixed order (first_name, last_name, start_date,
    end_date) so the parameter list always lines up with the conditions.
    Date bounds are inclusive and compare only the date part of the stored
    timestamp.
    """
    conditions: List[str] = []
    params: List[str] = []

    if criteria.first_name is not None:
        conditions.append("first_name = ?")
        params.append(criteria.first_name)

    if criteria.last_name is not None:
        conditions.append("last_name = ?")
        params.append(criteria.last_name)

    if criteria.start_date is not None:
        conditions.append("date(timestamp) >= ?")
        params.append(parse_date("start_date", criteria.start_date))

    if criteria.end_date is not None:
        conditions.append("date(timestamp) <= ?")
        params.append(parse_date("end_date", criteria.end_date))

    return conditions, params


def build_search_query(criteria: Optional[GreetingFilter] = None) -> Tuple[str, List[str]]:
    """
    Build the full parameterized SELECT for a search.

    An empty (or missing) filter yields no WHERE clause and matches every row.
    """
    conditions, params = build_conditions(criteria or GreetingFilter())
    sql = SELECT_COLUMNS
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)
    return sql + ORDER_BY, params


__all__ = ["build_conditions", "build_search_query", "parse_date"]
