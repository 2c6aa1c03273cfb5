"""Financial aggregation over billing entries, misc income and expenses."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from tutordesk.domain.entities import (
    BillingEntry,
    BillingStatus,
    Client,
    FinancialSummary,
    GeneralExpense,
    MiscIncome,
)
from tutordesk.logging_config import get_logger
from tutordesk.utils.period import matches_period

logger = get_logger("domain.summary")

ZERO = Decimal("0")


def summarize(
    billing_entries: Iterable[BillingEntry],
    misc_incomes: Iterable[MiscIncome],
    general_expenses: Iterable[GeneralExpense],
    period: str,
) -> FinancialSummary:
    """Compute income, expense and balance for a period.

    Income counts paid billing entries plus every misc income of the period.
    Expense counts every general expense of the period whether paid or
    pending. The balance is not clamped and may be negative.

    Args:
        billing_entries: Billing entries (any period, any status)
        misc_incomes: Misc income records
        general_expenses: General expense records
        period: Period token; a year token ("2024") covers the whole year

    Returns:
        FinancialSummary for the period
    """
    from_clients = sum(
        (
            e.amount
            for e in billing_entries
            if matches_period(e.period, period) and e.status == BillingStatus.PAID
        ),
        ZERO,
    )
    other_income = sum((i.amount for i in misc_incomes if matches_period(i.period, period)), ZERO)
    total_expense = sum(
        (e.amount for e in general_expenses if matches_period(e.period, period)), ZERO
    )
    total_income = from_clients + other_income

    return FinancialSummary(
        period=period,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
    )


def revenue_by_service(
    billing_entries: Iterable[BillingEntry],
    clients: Iterable[Client],
    period: Optional[str] = None,
) -> dict[str, Decimal]:
    """Sum paid billing entries per client service label.

    Entries whose client is unknown are left out.
    """
    service_by_client = {client.id: client.service for client in clients}
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for entry in billing_entries:
        if entry.status != BillingStatus.PAID:
            continue
        if period is not None and not matches_period(entry.period, period):
            continue
        service = service_by_client.get(entry.client_id)
        if service is None:
            logger.warning("Billing entry %s refers to unknown client %s", entry.id, entry.client_id)
            continue
        totals[service] += entry.amount

    return dict(totals)
