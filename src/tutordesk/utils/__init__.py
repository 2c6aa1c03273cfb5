"""Utility functions for tutordesk."""

from tutordesk.utils.period import (
    current_period,
    format_period,
    matches_period,
    normalize_period,
    normalize_period_filter,
    parse_period,
)
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.date_parser import parse_date, parse_time

__all__ = [
    "current_period",
    "format_period",
    "matches_period",
    "normalize_period",
    "normalize_period_filter",
    "parse_period",
    "parse_amount",
    "parse_date",
    "parse_time",
]
