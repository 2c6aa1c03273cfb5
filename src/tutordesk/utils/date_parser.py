"""Date and time parsing for session scheduling."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
_IN_DAYS_RE = re.compile(r"^in (\d+) days?$")
_TIME_RE = re.compile(r"^(\d{1,2})(?::|h)(\d{2})$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-05-10", "10 May 2024", etc.
    - Relative dates: "today", "tomorrow", "yesterday"
    - "next friday" (the next such weekday, never today)
    - "in 3 days"

    Args:
        date_str: Date string
        today: Reference day, defaults to date.today()

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "tomorrow": today + timedelta(days=1),
        "yesterday": today - timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if text.startswith("next ") and text[5:] in _WEEKDAYS:
        days_ahead = (_WEEKDAYS.index(text[5:]) - today.weekday()) % 7
        return today + timedelta(days=days_ahead or 7)

    match = _IN_DAYS_RE.match(text)
    if match:
        return today + timedelta(days=int(match.group(1)))

    try:
        return date_parser.parse(text, yearfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_time(time_str: str) -> str:
    """Normalize a time of day to "HH:MM".

    Accepts "9:00", "09:00" and "9h00".

    Raises:
        ValueError: If the time cannot be parsed
    """
    match = _TIME_RE.match(time_str.strip().lower())
    if match is None:
        raise ValueError(f"Could not parse time '{time_str}' (expected HH:MM)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Could not parse time '{time_str}': out of range")
    return f"{hours:02d}:{minutes:02d}"
