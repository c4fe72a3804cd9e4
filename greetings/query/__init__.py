"""
Query package for the greeting store.

Pure functions that assemble parameterized SQL; no I/O happens here.
"""

from greetings.query.predicates import build_conditions, build_search_query, parse_date

__all__ = [
    "build_conditions",
    "build_search_query",
    "parse_date",
]
