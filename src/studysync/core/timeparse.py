"""Permissive parsing of the date and time strings exchanged with the API.

The server and older app builds have written several textual forms over time.
Each helper tries a fixed, ordered list of patterns and the first that parses
wins. None of them raise: unparseable input is handed back to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

DUE_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)

TIME_OF_DAY_FORMATS: tuple[str, ...] = (
    "%H:%M:%S.%f",
    "%H:%M:%S",
    "%H:%M",
    "%I:%M %p",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S",
)

TIME_OF_DAY_OUTPUT = "%H:%M"


def _first_match(value: str, formats: Sequence[str]) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    for pattern in formats:
        try:
            return datetime.strptime(text, pattern)
        except ValueError:
            continue
    return None


def parse_due_date(value: str | None) -> datetime | None:
    """Return the parsed due date, or ``None`` when no known pattern matches."""

    if value is None:
        return None
    return _first_match(value, DUE_DATE_FORMATS)


def normalize_time_of_day(value: str) -> str:
    """Render a schedule time as 24-hour ``HH:MM``.

    >>> normalize_time_of_day("08:30:00.000000")
    '08:30'
    >>> normalize_time_of_day("2:05 PM")
    '14:05'
    >>> normalize_time_of_day("after lunch")
    'after lunch'
    """

    parsed = _first_match(value, TIME_OF_DAY_FORMATS)
    if parsed is None:
        return value
    return parsed.strftime(TIME_OF_DAY_OUTPUT)


__all__ = [
    "DUE_DATE_FORMATS",
    "TIME_OF_DAY_FORMATS",
    "normalize_time_of_day",
    "parse_due_date",
]
