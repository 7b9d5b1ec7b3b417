"""Tax-year scoping of transactions.

Dates are stored as ``YYYY-MM-DD`` strings. The year is read as the integer
prefix of the first ``-``-separated part, with no calendar validation and no
timezone conversion: ``"2024-13-99"`` belongs to 2024. Strings without a
leading integer have no year and never match, so malformed records drop out
silently. Every part of the system scopes by this one rule, which keeps the
dashboard, expense list and tax summary in agreement.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional, TypeVar

T = TypeVar("T")

_INTEGER_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")


def _leading_int(text: str) -> Optional[int]:
    match = _INTEGER_PREFIX.match(text)
    if not match:
        return None
    return int(match.group(1))


def year_from_date_string(value: Any) -> Optional[int]:
    """Extract the calendar year from a date string.

    Args:
        value: A ``YYYY-MM-DD`` string (or anything else).

    Returns:
        The year, or None when the string has no integer prefix.

    Example:
        >>> year_from_date_string("2024-13-99")
        2024
        >>> year_from_date_string("not a date") is None
        True
    """
    if not isinstance(value, str):
        return None
    return _leading_int(value.split("-")[0])


def month_from_date_string(value: Any) -> Optional[int]:
    """Extract the month (second part) from a date string.

    Follows the same prefix rule as the year; returns None when the month is
    missing or outside 1-12.
    """
    if not isinstance(value, str):
        return None
    parts = value.split("-")
    if len(parts) < 2:
        return None
    month = _leading_int(parts[1])
    if month is None or not 1 <= month <= 12:
        return None
    return month


def _date_of(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("date")
    return getattr(record, "date", None)


def filter_by_year(records: Iterable[T], year: int) -> list[T]:
    """Keep the records dated in ``year``.

    Args:
        records: Models with a ``date`` attribute, or mappings with a
            ``"date"`` key.
        year: Tax year to keep.

    Returns:
        The matching records in their original order.
    """
    return [r for r in records if year_from_date_string(_date_of(r)) == year]
