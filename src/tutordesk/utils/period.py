"""Period token utilities.

A period token is a ``YYYY-MM`` string grouping billing, income and expense
records into monthly buckets.
"""

import re
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from tutordesk.domain.errors import ValidationError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_RE = re.compile(r"^\d{4}$")


def format_period(month: int, year: int) -> str:
    """Build a period token from a zero-based month and a year.

    Args:
        month: Month index, 0 for January through 11 for December
        year: Four-digit year

    Returns:
        Period token such as "2024-05"

    Raises:
        ValidationError: If month is outside 0..11
    """
    if not 0 <= month <= 11:
        raise ValidationError(f"Month must be between 0 and 11, got {month}")
    return f"{year:04d}-{month + 1:02d}"


def parse_period(period_str: str) -> tuple[int, int]:
    """Parse a period token into (zero-based month, year).

    Accepts "2024-05", "2024-5", "this month" and "last month".

    Raises:
        ValidationError: If the string is not a valid period
    """
    text = period_str.strip().lower()
    if text in ("this month", "current"):
        today = date.today()
        return today.month - 1, today.year
    if text in ("last month", "previous"):
        last = date.today() - relativedelta(months=1)
        return last.month - 1, last.year

    match = _PERIOD_RE.match(text)
    if match is None:
        raise ValidationError(f"Could not parse period '{period_str}' (expected YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Could not parse period '{period_str}': month out of range")
    return month - 1, year


def normalize_period(period_str: str) -> str:
    """Return the canonical ``YYYY-MM`` token for a period string."""
    month, year = parse_period(period_str)
    return format_period(month, year)


def current_period(today: Optional[date] = None) -> str:
    """Return the period token of the current month."""
    today = today or date.today()
    return format_period(today.month - 1, today.year)


def period_of(day: date) -> str:
    """Return the period token a calendar day falls in."""
    return day.strftime("%Y-%m")


def matches_period(value: Optional[str], period: str) -> bool:
    """Check whether a record's period field falls in a period.

    Prefix comparison, so a year token ("2024") matches every month of the
    year and a day-precision value ("2024-05-10") matches its month.
    """
    return (value or "").startswith(period)


def normalize_period_filter(period_str: str) -> str:
    """Return the token to filter records by.

    A bare year ("2024") is kept so it matches the whole year; anything
    else is normalized to ``YYYY-MM``, so "2024-1" matches January only.
    """
    text = period_str.strip()
    if _YEAR_RE.match(text):
        return text
    return normalize_period(text)
