"""Field clause evaluation, including created-date windows.

A date filter value is an optional operator (=, >, >=, <, <=) followed by a
year, a year-month, or a full date. The component count sets the window:
``2025`` covers the whole year, ``2025-06`` the whole month, ``2025-06-15``
one day. A value that cannot be parsed never matches.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from specatlas.models import SpecRecord
from specatlas.search.query import QueryField


class DateOperator(Enum):
    EQ = "="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="


# Two-character operators first so ">=" is not read as ">"
_OPERATOR_PREFIXES = (
    (">=", DateOperator.GTE),
    ("<=", DateOperator.LTE),
    (">", DateOperator.GT),
    ("<", DateOperator.LT),
    ("=", DateOperator.EQ),
)


@dataclass(frozen=True)
class DateFilter:
    """A comparison against an inclusive [lower, upper] date window."""

    operator: DateOperator
    lower: date
    upper: date

    def matches(self, value: date) -> bool:
        if isinstance(value, datetime):
            value = value.date()
        if self.operator is DateOperator.EQ:
            return self.lower <= value <= self.upper
        if self.operator is DateOperator.GT:
            return value > self.upper
        if self.operator is DateOperator.GTE:
            return value >= self.lower
        if self.operator is DateOperator.LT:
            return value < self.lower
        return value <= self.upper


def parse_date_filter(raw: str) -> DateFilter | None:
    """Parse a created-filter value such as ``>=2025-06``.

    Returns:
        The filter, or None if the value is malformed.
    """
    operator, rest = _split_operator(raw.strip())
    window = parse_date_window(rest)
    if window is None:
        return None
    return DateFilter(operator, *window)


def parse_date_window(raw: str) -> tuple[date, date] | None:
    """Return the inclusive window a partial date covers, or None."""
    parts = raw.strip().split("-")
    if not 1 <= len(parts) <= 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    try:
        numbers = [int(p) for p in parts]
        if len(numbers) == 1:
            year = numbers[0]
            return date(year, 1, 1), date(year, 12, 31)
        if len(numbers) == 2:
            year, month = numbers
            last_day = calendar.monthrange(year, month)[1]
            return date(year, month, 1), date(year, month, last_day)
        day = date(*numbers)
        return day, day
    except (ValueError, OverflowError, calendar.IllegalMonthError):
        return None


def matches_field(spec: SpecRecord, field: QueryField, value: str) -> bool:
    """Evaluate one field clause against a spec.

    Args:
        spec: Spec to test.
        field: Clause field.
        value: Lowercased clause value.
    """
    value = value.lower()
    if field is QueryField.STATUS:
        return spec.status.value == value
    if field is QueryField.PRIORITY:
        return spec.priority is not None and spec.priority.value == value
    if field is QueryField.TAG:
        return any(tag.lower() == value or value in tag.lower() for tag in spec.tags)
    if field is QueryField.TITLE:
        return value in spec.title.lower()
    if field is QueryField.CREATED:
        return matches_created(spec.created, value)
    raise ValueError(f"Unhandled query field: {field}")


def matches_created(created: date | None, raw: str) -> bool:
    """True if the creation date satisfies a created-filter value."""
    if created is None:
        return False
    date_filter = parse_date_filter(raw)
    if date_filter is None:
        return False
    return date_filter.matches(created)


def _split_operator(raw: str) -> tuple[DateOperator, str]:
    for prefix, operator in _OPERATOR_PREFIXES:
        if raw.startswith(prefix):
            return operator, raw[len(prefix) :]
    return DateOperator.EQ, raw
