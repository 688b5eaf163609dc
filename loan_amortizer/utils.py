"""Utility functions for the loan amortizer.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding whole periods (months, quarters, years),
normalizing a date to the start of its period and measuring the fractional
number of periods between two dates. It uses Python's ``datetime`` and
``calendar`` modules for the calendar arithmetic.

It also holds the small numeric helpers the engine relies on so that invalid
input turns into NaN or infinity instead of raising.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime
from typing import Any, Optional

MONTHS_PER_PERIOD = {"month": 1, "quarter": 3, "year": 12}


def parse_date(value: str) -> datetime:
    """Parse a ``YYYY-MM`` or ``YYYY-MM-DD`` string into a ``datetime``.

    A missing day component means the first day of the month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return datetime(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def as_datetime(value: date) -> datetime:
    """Promote a plain ``date`` to a midnight ``datetime``."""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29). Works for both ``date``
    and ``datetime`` values; the time of day is kept.
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def add_periods(dt: date, count: int, unit: str) -> date:
    """Return ``dt`` moved ``count`` periods of ``unit`` forward.

    Unknown units leave the date untouched.
    """
    months = MONTHS_PER_PERIOD.get(unit)
    if months is None:
        return dt
    return add_months(dt, count * months)


def start_of_period(dt: datetime, unit: str) -> datetime:
    """Normalize ``dt`` to midnight on the first day of its month/quarter/year.

    Unknown units leave the date untouched.
    """
    dt = as_datetime(dt)
    if unit == "month":
        month = dt.month
    elif unit == "quarter":
        month = dt.month - (dt.month - 1) % 3
    elif unit == "year":
        month = 1
    else:
        return dt
    return dt.replace(month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


def months_between(start: datetime, end: datetime) -> float:
    """Fractional number of calendar months from ``start`` to ``end``.

    The whole-month part is counted on the calendar; the remainder is the
    elapsed share of the month following (or preceding) the anchor date
    ``end`` shifted by the whole-month count.
    """
    start = as_datetime(start)
    end = as_datetime(end)
    whole = (start.year - end.year) * 12 + (start.month - end.month)
    anchor = add_months(end, whole)
    if start < anchor:
        adjust = (start - anchor) / (anchor - add_months(end, whole - 1))
    else:
        adjust = (start - anchor) / (add_months(end, whole + 1) - anchor)
    return -(whole + adjust)


def periods_between(start: datetime, end: datetime, unit: str) -> float:
    """Fractional number of ``unit`` periods from ``start`` to ``end``.

    Returns 0 for unknown units.
    """
    months = MONTHS_PER_PERIOD.get(unit)
    if months is None:
        return 0.0
    return months_between(start, end) / months


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """IEEE style division: x/0 gives a signed infinity and 0/0 gives NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def compound(rate: float, periods: float) -> float:
    """Return ``(1 + rate) ** periods``.

    A non-positive base yields NaN and overflow yields infinity.
    """
    base = 1 + rate
    if not base > 0:
        return math.nan
    try:
        return float(base) ** periods
    except OverflowError:
        return math.inf


def nan_to_zero(value: Optional[float]) -> float:
    """Collapse ``None`` and NaN to 0."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return 0
    return value
