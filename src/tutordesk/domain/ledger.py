"""Misc income and general expense domain service."""

from decimal import Decimal
from typing import Optional

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import require_admin
from tutordesk.domain.entities import (
    Collection,
    ExpenseStatus,
    GeneralExpense,
    MiscIncome,
    NotFound,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import NotFoundError, ValidationError, required_field
from tutordesk.domain.session import Session
from tutordesk.utils.period import matches_period, normalize_period


def _validate(description: str, amount: Decimal) -> None:
    if not (description or "").strip():
        raise ValidationError(required_field("Description"))
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")


class LedgerService:
    """Service for income and expenses outside monthly billing.

    Every operation is administrator-only.
    """

    def __init__(self, store: RecordStore):
        """Initialize ledger service.

        Args:
            store: Record store instance
        """
        self.store = store

    def _update(self, collection: Collection, doc_id: str, fields: dict) -> UpdateResult:
        try:
            self.store.update_document(collection, doc_id, fields)
        except NotFoundError:
            return NotFound(collection, doc_id)
        return Updated(collection, doc_id)

    def _delete(self, collection: Collection, doc_id: str) -> UpdateResult:
        if not self.store.delete_document(collection, doc_id):
            return NotFound(collection, doc_id)
        return Updated(collection, doc_id)

    # Misc income
    def add_income(self, session: Session, description: str, amount: Decimal, period: str) -> str:
        """Record misc income. Returns the income ID."""
        require_admin(session.staff)
        _validate(description, amount)
        income = MiscIncome(
            id=self.store.new_id(Collection.MISC_INCOMES),
            description=description.strip(),
            amount=amount,
            period=normalize_period(period),
        )
        self.store.insert_document(Collection.MISC_INCOMES, income.id, mappers.misc_income_to_document(income))
        return income.id

    def update_income(
        self,
        session: Session,
        income_id: str,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> UpdateResult:
        """Change a misc income's description or amount."""
        require_admin(session.staff)
        fields = {}
        if description is not None:
            _validate(description, Decimal("1"))
            fields["description"] = description.strip()
        if amount is not None:
            _validate("-", amount)
            fields["amount"] = str(amount)
        return self._update(Collection.MISC_INCOMES, income_id, fields)

    def delete_income(self, session: Session, income_id: str) -> UpdateResult:
        """Delete a misc income record."""
        require_admin(session.staff)
        return self._delete(Collection.MISC_INCOMES, income_id)

    def list_incomes(self, session: Session, period: Optional[str] = None) -> list[MiscIncome]:
        """List misc income, optionally for one period."""
        require_admin(session.staff)
        incomes = [mappers.misc_income_to_domain(d) for d in self.store.list_documents(Collection.MISC_INCOMES)]
        if period is not None:
            incomes = [i for i in incomes if matches_period(i.period, period)]
        return incomes

    # General expenses
    def add_expense(
        self,
        session: Session,
        description: str,
        amount: Decimal,
        period: str,
        status: ExpenseStatus = ExpenseStatus.PENDING,
    ) -> str:
        """Record a general expense. Returns the expense ID."""
        require_admin(session.staff)
        _validate(description, amount)
        expense = GeneralExpense(
            id=self.store.new_id(Collection.GENERAL_EXPENSES),
            description=description.strip(),
            amount=amount,
            period=normalize_period(period),
            status=status,
        )
        self.store.insert_document(Collection.GENERAL_EXPENSES, expense.id, mappers.expense_to_document(expense))
        return expense.id

    def update_expense(
        self,
        session: Session,
        expense_id: str,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        status: Optional[ExpenseStatus] = None,
    ) -> UpdateResult:
        """Change a general expense's description, amount or status."""
        require_admin(session.staff)
        fields = {}
        if description is not None:
            _validate(description, Decimal("1"))
            fields["description"] = description.strip()
        if amount is not None:
            _validate("-", amount)
            fields["amount"] = str(amount)
        if status is not None:
            fields["status"] = ExpenseStatus(status).value
        return self._update(Collection.GENERAL_EXPENSES, expense_id, fields)

    def delete_expense(self, session: Session, expense_id: str) -> UpdateResult:
        """Delete a general expense."""
        require_admin(session.staff)
        return self._delete(Collection.GENERAL_EXPENSES, expense_id)

    def list_expenses(self, session: Session, period: Optional[str] = None) -> list[GeneralExpense]:
        """List general expenses, optionally for one period."""
        require_admin(session.staff)
        expenses = [mappers.expense_to_domain(d) for d in self.store.list_documents(Collection.GENERAL_EXPENSES)]
        if period is not None:
            expenses = [e for e in expenses if matches_period(e.period, period)]
        return expenses
