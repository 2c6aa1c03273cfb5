"""Monthly billing generation and billing entry service."""

from decimal import Decimal
from typing import Callable, Iterable, Optional

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import require_admin
from tutordesk.domain.entities import (
    BillingEntry,
    BillingStatus,
    Client,
    Collection,
    GenerationOutcome,
    NotFound,
    RecordStatus,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    client_not_found,
    duplicate_billing_entry,
)
from tutordesk.domain.session import Session
from tutordesk.logging_config import get_logger
from tutordesk.utils.period import format_period, matches_period, normalize_period, parse_period

logger = get_logger("domain.billing")


def monthly_fee_description(period: str) -> str:
    """Return the description used for generated monthly fees."""
    return f"Monthly fee {period}"


def qualifying_clients(roster: Iterable[Client]) -> list[Client]:
    """Active clients with a positive monthly fee, first occurrence per ID."""
    seen: set[str] = set()
    result = []
    for client in roster:
        if client.status != RecordStatus.ACTIVE or client.monthly_fee <= 0:
            continue
        if client.id in seen:
            continue
        seen.add(client.id)
        result.append(client)
    return result


def plan_monthly_entries(
    roster: Iterable[Client],
    existing_entries: Iterable[BillingEntry],
    month: int,
    year: int,
    new_id: Callable[[], str],
) -> GenerationOutcome:
    """Decide which billing entries a month still needs.

    At most one entry exists per (client, period): clients that already have
    an entry for the period are skipped and counted.

    Args:
        roster: Clients to consider
        existing_entries: Billing entries already stored (any period)
        month: Zero-based month (0 = January)
        year: Four-digit year
        new_id: Generates IDs for new entries

    Returns:
        GenerationOutcome with the entries to create
    """
    period = format_period(month, year)
    candidates = qualifying_clients(roster)
    if not candidates:
        return GenerationOutcome(period=period, nothing_to_generate=True)

    billed = {entry.client_id for entry in existing_entries if entry.period == period}

    created = []
    skipped = 0
    for client in candidates:
        if client.id in billed:
            skipped += 1
            continue
        created.append(
            BillingEntry(
                id=new_id(),
                client_id=client.id,
                description=monthly_fee_description(period),
                amount=client.monthly_fee,
                period=period,
                status=BillingStatus.PENDING,
            )
        )

    return GenerationOutcome(period=period, created=tuple(created), skipped_existing=skipped)


class BillingService:
    """Service for generating and tracking client billing entries."""

    def __init__(self, store: RecordStore):
        """Initialize billing service.

        Args:
            store: Record store instance
        """
        self.store = store

    def _client_exists(self, client_id: str) -> bool:
        return self.store.get_document(Collection.CLIENTS, client_id) is not None

    def _entries_for(self, client_id: str, period: str) -> list[BillingEntry]:
        documents = self.store.query_documents(
            Collection.BILLING_ENTRIES, {"client_id": client_id, "period": period}
        )
        return [mappers.billing_entry_to_domain(doc) for doc in documents]

    def generate_monthly_entries(self, session: Session, month: int, year: int) -> GenerationOutcome:
        """Create the month's pending fee for every active, paying client.

        Existing entries are looked up in the store for each client right
        before the write, and all new entries are committed in one batch.
        Running this again for the same month creates nothing.

        Args:
            session: Signed-in administrator
            month: Zero-based month (0 = January)
            year: Four-digit year

        Returns:
            GenerationOutcome with created entries and skipped count

        Raises:
            PermissionDeniedError: If the session is not an administrator
            ValidationError: If month is outside 0..11
            BatchCommitFailure: If the batch write fails (nothing is written)
        """
        require_admin(session.staff)
        period = format_period(month, year)

        roster = [mappers.client_to_domain(doc) for doc in self.store.list_documents(Collection.CLIENTS)]
        candidates = qualifying_clients(roster)
        if not candidates:
            logger.info("No active clients with a monthly fee for %s", period)
            return GenerationOutcome(period=period, nothing_to_generate=True)

        existing: list[BillingEntry] = []
        for client in candidates:
            existing.extend(self._entries_for(client.id, period))

        outcome = plan_monthly_entries(
            candidates,
            existing,
            month,
            year,
            new_id=lambda: self.store.new_id(Collection.BILLING_ENTRIES),
        )

        batch = self.store.batch()
        for entry in outcome.created:
            batch.set(Collection.BILLING_ENTRIES, entry.id, mappers.billing_entry_to_document(entry))
        batch.commit()

        logger.info(
            "Generated %d billing entries for %s (%d already existed)",
            outcome.created_count,
            period,
            outcome.skipped_existing,
        )
        return outcome

    def generate_for_period(self, session: Session, period: str) -> GenerationOutcome:
        """Generate monthly entries for a "YYYY-MM" period token."""
        month, year = parse_period(period)
        return self.generate_monthly_entries(session, month, year)

    def add_entry(
        self,
        session: Session,
        client_id: str,
        amount: Decimal,
        period: str,
        description: Optional[str] = None,
        status: BillingStatus = BillingStatus.PENDING,
    ) -> str:
        """Record a billing entry by hand.

        Returns:
            Billing entry ID

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If the client does not exist
            ConflictError: If the client already has an entry for the period
        """
        require_admin(session.staff)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        period = normalize_period(period)

        if not self._client_exists(client_id):
            raise NotFoundError(client_not_found(client_id))
        if self._entries_for(client_id, period):
            raise ConflictError(duplicate_billing_entry(client_id, period))

        entry = BillingEntry(
            id=self.store.new_id(Collection.BILLING_ENTRIES),
            client_id=client_id,
            description=description or monthly_fee_description(period),
            amount=amount,
            period=period,
            status=status,
        )
        self.store.insert_document(
            Collection.BILLING_ENTRIES, entry.id, mappers.billing_entry_to_document(entry)
        )
        return entry.id

    def update_entry_status(self, session: Session, entry_id: str, status: BillingStatus) -> UpdateResult:
        """Mark a billing entry paid, pending or overdue."""
        require_admin(session.staff)
        try:
            self.store.update_document(
                Collection.BILLING_ENTRIES, entry_id, {"status": BillingStatus(status).value}
            )
        except NotFoundError:
            logger.warning("Billing entry %s not found for status update", entry_id)
            return NotFound(Collection.BILLING_ENTRIES, entry_id)
        return Updated(Collection.BILLING_ENTRIES, entry_id)

    def list_entries(
        self,
        session: Session,
        period: Optional[str] = None,
        status: Optional[BillingStatus] = None,
    ) -> list[BillingEntry]:
        """List billing entries, optionally for one period and status."""
        require_admin(session.staff)
        entries = [
            mappers.billing_entry_to_domain(doc)
            for doc in self.store.list_documents(Collection.BILLING_ENTRIES)
        ]
        if period is not None:
            entries = [e for e in entries if matches_period(e.period, period)]
        if status is not None:
            entries = [e for e in entries if e.status == status]
        return entries

    def outstanding_entries(self, session: Session) -> list[BillingEntry]:
        """Pending and overdue entries, oldest period first."""
        entries = [
            e
            for e in self.list_entries(session)
            if e.status in (BillingStatus.PENDING, BillingStatus.OVERDUE)
        ]
        return sorted(entries, key=lambda e: e.period)
