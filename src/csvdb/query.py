"""Partial-match queries over decoded records."""

from collections.abc import Iterable, Mapping
from typing import Any

from .codec import to_text


def matches(query: Mapping[str, Any], record: Mapping[str, Any]) -> bool:
    """
    Return True if `record` satisfies every key/value pair of `query`.

    Comparison is text equality: a query value of ``25`` only matches the
    stored text ``"25"``. An empty query matches every record.

    A query value of ``None`` is the text ``""``: it matches a field stored
    as empty, never a field padded with None because its line was short.
    """
    for key, value in query.items():
        if record.get(key) != to_text(value):
            return False
    return True


def filter_records(
    query: Mapping[str, Any], records: Iterable[Mapping[str, Any]]
) -> list:
    """Return every record matching `query`, in order."""
    return [record for record in records if matches(query, record)]


def first_match(query: Mapping[str, Any], records: Iterable[Mapping[str, Any]]):
    """Return the first record matching `query`, or None."""
    return next((record for record in records if matches(query, record)), None)
