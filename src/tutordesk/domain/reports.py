"""Reports over revenue, team activity and clients."""

from collections import Counter
from decimal import Decimal
from typing import Optional

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import require_admin
from tutordesk.domain.entities import (
    Client,
    ClientAnalytics,
    Collection,
    EventStatus,
    FinancialReport,
    StaffMember,
    StaffPerformance,
    Timesheet,
    TimesheetLine,
)
from tutordesk.domain.errors import NotFoundError, PermissionDeniedError, admin_required, staff_not_found
from tutordesk.domain.session import Session
from tutordesk.domain.summary import ZERO, revenue_by_service
from tutordesk.utils.period import matches_period

OTHER_INCOME_LABEL = "Other income"
FALLBACK_SERVICE_TYPE = "remedial"


def rate_for_service(staff: StaffMember, service_label: str) -> Decimal:
    """Hourly rate a staff member earns for a client's service label.

    Picks the rate whose service type appears in the label, then the
    fallback service type's rate, then the first rate. Staff without
    rates earn nothing.
    """
    if not staff.service_rates:
        return ZERO
    label = (service_label or "").lower()
    for rate in staff.service_rates:
        if rate.service_type.lower() in label:
            return rate.hourly_rate
    for rate in staff.service_rates:
        if rate.service_type.lower() == FALLBACK_SERVICE_TYPE:
            return rate.hourly_rate
    return staff.service_rates[0].hourly_rate


class ReportService:
    """Service for administrator reports."""

    def __init__(self, store: RecordStore):
        """Initialize report service.

        Args:
            store: Record store instance
        """
        self.store = store

    def _staff(self) -> list[StaffMember]:
        return [mappers.staff_to_domain(d) for d in self.store.list_documents(Collection.STAFF)]

    def _clients(self) -> list[Client]:
        return [mappers.client_to_domain(d) for d in self.store.list_documents(Collection.CLIENTS)]

    def _completed_events(self, period: str):
        return [
            e
            for e in (mappers.event_to_domain(d) for d in self.store.list_documents(Collection.EVENTS))
            if e.status == EventStatus.COMPLETED and matches_period(e.date.isoformat(), period)
        ]

    def financial_report(self, session: Session, period: Optional[str] = None) -> FinancialReport:
        """Revenue per service label and total expense.

        Args:
            session: Signed-in administrator
            period: Period token, or None for all time

        Returns:
            FinancialReport; misc income appears under "Other income"
        """
        require_admin(session.staff)
        entries = [mappers.billing_entry_to_domain(d) for d in self.store.list_documents(Collection.BILLING_ENTRIES)]
        revenue = revenue_by_service(entries, self._clients(), period)

        other = sum(
            (
                i.amount
                for i in (mappers.misc_income_to_domain(d) for d in self.store.list_documents(Collection.MISC_INCOMES))
                if period is None or matches_period(i.period, period)
            ),
            ZERO,
        )
        if other > 0:
            revenue[OTHER_INCOME_LABEL] = revenue.get(OTHER_INCOME_LABEL, ZERO) + other

        total_expense = sum(
            (
                e.amount
                for e in (mappers.expense_to_domain(d) for d in self.store.list_documents(Collection.GENERAL_EXPENSES))
                if period is None or matches_period(e.period, period)
            ),
            ZERO,
        )
        return FinancialReport(revenue_by_service=revenue, total_expense=total_expense)

    def team_performance(self, session: Session, period: str) -> list[StaffPerformance]:
        """Completed sessions and estimated earnings per staff member.

        Earnings are completed sessions times the member's first rate.
        """
        require_admin(session.staff)
        completed = Counter(e.staff_handle for e in self._completed_events(period))
        rows = []
        for staff in sorted(self._staff(), key=lambda s: s.name.lower()):
            count = completed.get(staff.handle, 0)
            rate = staff.service_rates[0].hourly_rate if staff.service_rates else ZERO
            rows.append(
                StaffPerformance(
                    handle=staff.handle,
                    name=staff.name,
                    completed_sessions=count,
                    estimated_earnings=rate * count,
                )
            )
        return rows

    def client_analytics(self, session: Session) -> ClientAnalytics:
        """Client counts per status and per service label."""
        require_admin(session.staff)
        clients = self._clients()
        return ClientAnalytics(
            status_counts=dict(Counter(c.status.value for c in clients)),
            service_counts=dict(Counter(c.service for c in clients)),
        )

    def timesheet(self, session: Session, handle: str, period: str) -> Timesheet:
        """Completed sessions of one staff member with per-session earning.

        Regular staff may only request their own timesheet.

        Raises:
            PermissionDeniedError: If a regular staff member asks for someone else
            NotFoundError: If no staff member has the handle
        """
        if not session.is_admin and handle.lower() != session.handle.lower():
            raise PermissionDeniedError(admin_required())
        matches = self.store.query_documents(Collection.STAFF, {"handle_lowercase": handle.strip().lower()})
        if not matches:
            raise NotFoundError(staff_not_found(handle))
        staff = mappers.staff_to_domain(matches[0])

        clients = {c.id: c for c in self._clients()}
        lines = []
        for event in self._completed_events(period):
            if event.staff_handle != staff.handle:
                continue
            client = clients.get(event.client_id)
            if client is None:
                lines.append(TimesheetLine(event.id, event.date, event.title, event.service, ZERO))
                continue
            lines.append(
                TimesheetLine(
                    event_id=event.id,
                    date=event.date,
                    client_name=client.name,
                    service=client.service,
                    earning=rate_for_service(staff, client.service),
                )
            )
        lines.sort(key=lambda line: line.date)
        return Timesheet(handle=staff.handle, period=period, lines=tuple(lines))
