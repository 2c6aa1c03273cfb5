"""Tests for period, amount and date parsing."""

from datetime import date
from decimal import Decimal

import pytest

from tutordesk.domain.errors import ValidationError
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.date_parser import parse_date, parse_time
from tutordesk.utils.period import (
    current_period,
    format_period,
    matches_period,
    normalize_period,
    normalize_period_filter,
    parse_period,
    period_of,
)


def test_format_period_zero_based_month():
    assert format_period(4, 2024) == "2024-05"
    assert format_period(0, 2024) == "2024-01"
    assert format_period(11, 2023) == "2023-12"


@pytest.mark.parametrize("month", [-1, 12])
def test_format_period_rejects_out_of_range(month):
    with pytest.raises(ValidationError):
        format_period(month, 2024)


def test_parse_period():
    assert parse_period("2024-05") == (4, 2024)
    assert parse_period("2024-5") == (4, 2024)
    assert normalize_period(" 2024-5 ") == "2024-05"


@pytest.mark.parametrize("text", ["May 2024", "2024-13", "2024/05", ""])
def test_parse_period_invalid(text):
    with pytest.raises(ValidationError):
        parse_period(text)


def test_current_period():
    assert current_period(date(2024, 5, 10)) == "2024-05"
    assert period_of(date(2024, 12, 31)) == "2024-12"


def test_matches_period_is_prefix():
    assert matches_period("2024-05", "2024-05")
    assert matches_period("2024-05", "2024")
    assert matches_period("2024-05-10", "2024-05")
    assert not matches_period("2024-04", "2024-05")
    assert not matches_period(None, "2024")


@pytest.mark.parametrize(
    "text, expected",
    [("2024", "2024"), ("2024-1", "2024-01"), ("2024-01", "2024-01"), (" 2024-12 ", "2024-12")],
)
def test_normalize_period_filter(text, expected):
    assert normalize_period_filter(text) == expected


def test_normalize_period_filter_keeps_month_apart():
    token = normalize_period_filter("2024-1")

    assert matches_period("2024-01", token)
    assert not matches_period("2024-10", token)


def test_normalize_period_filter_invalid():
    with pytest.raises(ValidationError):
        normalize_period_filter("2024-13")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("450", Decimal("450")),
        ("450.50", Decimal("450.50")),
        ("R$ 450,50", Decimal("450.50")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("$1,234.56", Decimal("1234.56")),
        ("R$ 1.234", Decimal("1234")),
        ("R$ 1.234.567", Decimal("1234567")),
        ("1.234", Decimal("1.234")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_parse_amount_invalid():
    with pytest.raises(ValueError):
        parse_amount("abc")
    with pytest.raises(ValueError):
        parse_amount("")


def test_parse_date():
    today = date(2024, 5, 10)  # a Friday

    assert parse_date("2024-05-17", today) == date(2024, 5, 17)
    assert parse_date("today", today) == today
    assert parse_date("tomorrow", today) == date(2024, 5, 11)
    assert parse_date("next friday", today) == date(2024, 5, 17)
    assert parse_date("next monday", today) == date(2024, 5, 13)
    assert parse_date("in 3 days", today) == date(2024, 5, 13)


def test_parse_date_invalid():
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_parse_time():
    assert parse_time("9:00") == "09:00"
    assert parse_time("14h30") == "14:30"
    with pytest.raises(ValueError):
        parse_time("25:00")
    with pytest.raises(ValueError):
        parse_time("noon")
