"""Tests for financial aggregation."""

from decimal import Decimal

from tutordesk.domain.entities import (
    BillingEntry,
    BillingStatus,
    Client,
    ExpenseStatus,
    GeneralExpense,
    MiscIncome,
    RecordStatus,
)
from tutordesk.domain.summary import revenue_by_service, summarize


def _entry(entry_id, client_id, amount, period="2024-05", status=BillingStatus.PAID):
    return BillingEntry(entry_id, client_id, f"Monthly fee {period}", Decimal(amount), period, status)


def _client(client_id, service):
    return Client(client_id, client_id.title(), RecordStatus.ACTIVE, "bruno.costa", service, Decimal("0"))


def test_summarize_period():
    """Test income, expense and balance for a month."""
    billing = [
        _entry("e1", "ana", "450"),
        _entry("e2", "pedro", "300", status=BillingStatus.PENDING),
        _entry("e3", "ana", "450", period="2024-04"),
    ]
    misc = [MiscIncome("m1", "Workshop", Decimal("150"), "2024-05")]
    expenses = [
        GeneralExpense("x1", "Rent", Decimal("250"), "2024-05", ExpenseStatus.PAID),
        GeneralExpense("x2", "Supplies", Decimal("80"), "2024-05", ExpenseStatus.PENDING),
    ]

    result = summarize(billing, misc, expenses, "2024-05")

    assert result.period == "2024-05"
    assert result.total_income == Decimal("600")
    assert result.total_expense == Decimal("330")
    assert result.balance == Decimal("270")


def test_summarize_balance_may_be_negative():
    expenses = [GeneralExpense("x1", "Rent", Decimal("800"), "2024-05", ExpenseStatus.PENDING)]

    result = summarize([_entry("e1", "ana", "450")], [], expenses, "2024-05")

    assert result.balance == Decimal("-350")


def test_summarize_year_token_covers_every_month():
    """Test that a year token includes all months of the year."""
    billing = [
        _entry("e1", "ana", "450", period="2024-01"),
        _entry("e2", "ana", "450", period="2024-12"),
        _entry("e3", "ana", "450", period="2023-12"),
    ]

    result = summarize(billing, [], [], "2024")

    assert result.total_income == Decimal("900")


def test_summarize_empty_period():
    result = summarize([], [], [], "2024-05")

    assert result.total_income == Decimal("0")
    assert result.total_expense == Decimal("0")
    assert result.balance == Decimal("0")


def test_revenue_by_service_groups_paid_entries():
    """Test revenue grouping by client service label."""
    clients = [_client("ana", "Tutoring - Math"), _client("pedro", "Speech Therapy"), _client("lia", "Tutoring - Math")]
    billing = [
        _entry("e1", "ana", "450"),
        _entry("e2", "lia", "400"),
        _entry("e3", "pedro", "300"),
        _entry("e4", "pedro", "300", status=BillingStatus.PENDING),
    ]

    revenue = revenue_by_service(billing, clients)

    assert revenue == {"Tutoring - Math": Decimal("850"), "Speech Therapy": Decimal("300")}


def test_revenue_by_service_skips_unknown_clients_and_other_periods():
    clients = [_client("ana", "Tutoring - Math")]
    billing = [
        _entry("e1", "ana", "450"),
        _entry("e2", "ghost", "999"),
        _entry("e3", "ana", "450", period="2024-04"),
    ]

    revenue = revenue_by_service(billing, clients, period="2024-05")

    assert revenue == {"Tutoring - Math": Decimal("450")}
