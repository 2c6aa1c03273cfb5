"""Client domain service."""

import uuid
from dataclasses import replace
from datetime import datetime, UTC
from decimal import Decimal
from typing import Callable, Optional

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import can_view, filter_visible, require_admin
from tutordesk.domain.entities import (
    Client,
    Collection,
    NotFound,
    ProgressLogEntry,
    RecordStatus,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    NotFoundError,
    ValidationError,
    required_field,
    staff_not_found,
)
from tutordesk.domain.session import Session
from tutordesk.logging_config import get_logger

logger = get_logger("domain.clients")


class ClientService:
    """Service for managing clients (students and patients)."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = lambda: datetime.now(UTC)):
        """Initialize client service.

        Args:
            store: Record store instance
            clock: Returns the current time for progress log entries
        """
        self.store = store
        self.clock = clock

    def _validate(self, client: Client) -> str:
        """Check a client record and return the canonical staff handle."""
        if not client.name.strip():
            raise ValidationError(required_field("Name"))
        if not client.staff_handle.strip():
            raise ValidationError(required_field("Responsible staff"))
        if client.monthly_fee < 0:
            raise ValidationError("Monthly fee cannot be negative")
        matches = self.store.query_documents(
            Collection.STAFF, {"handle_lowercase": client.staff_handle.lower()}
        )
        if not matches:
            raise NotFoundError(staff_not_found(client.staff_handle))
        return matches[0]["handle"]

    def create_client(
        self,
        session: Session,
        name: str,
        staff_handle: str,
        service: str,
        monthly_fee: Decimal = Decimal("0"),
        status: RecordStatus = RecordStatus.ACTIVE,
        **details,
    ) -> Client:
        """Register a new client.

        Args:
            session: Signed-in administrator
            name: Client name
            staff_handle: Handle of the responsible staff member
            service: Service label (e.g. "Tutoring - Math")
            monthly_fee: Monthly fee, zero for clients billed otherwise
            status: Active or inactive
            **details: Optional birth_date, guardian_name, guardian_contact, notes

        Returns:
            The stored Client
        """
        client = Client(
            id=self.store.new_id(Collection.CLIENTS),
            name=name.strip(),
            status=status,
            staff_handle=staff_handle.strip(),
            service=service.strip(),
            monthly_fee=Decimal(monthly_fee),
            **details,
        )
        return self.save_client(session, client)

    def save_client(self, session: Session, client: Client) -> Client:
        """Create or overwrite a client record (administrator only).

        The progress log of an existing client is kept as stored; it only
        grows through add_progress_entry.
        """
        require_admin(session.staff)
        client = replace(client, staff_handle=self._validate(client))

        existing = self.get_client(client.id)
        if existing is not None:
            client = replace(client, progress_log=existing.progress_log)

        self.store.insert_document(Collection.CLIENTS, client.id, mappers.client_to_document(client))
        return client

    def get_client(self, client_id: str) -> Optional[Client]:
        """Get client by ID."""
        doc = self.store.get_document(Collection.CLIENTS, client_id)
        if doc is None:
            return None
        return mappers.client_to_domain(doc)

    def list_clients(self, session: Session, search: Optional[str] = None) -> list[Client]:
        """Clients visible to the session, by name.

        Args:
            session: Current session
            search: Case-insensitive match on client name or staff name
        """
        clients = [mappers.client_to_domain(doc) for doc in self.store.list_documents(Collection.CLIENTS)]
        clients = filter_visible(session.staff, clients)

        if search:
            query = search.strip().lower()
            staff_names = {
                doc["handle"]: doc.get("name", "").lower()
                for doc in self.store.list_documents(Collection.STAFF)
            }
            clients = [
                c
                for c in clients
                if query in c.name.lower() or query in staff_names.get(c.staff_handle, "")
            ]

        return sorted(clients, key=lambda c: c.name.lower())

    def count_active(self, session: Session) -> int:
        """Number of active clients visible to the session."""
        return sum(1 for c in self.list_clients(session) if c.status == RecordStatus.ACTIVE)

    def add_progress_entry(self, session: Session, client_id: str, text: str) -> UpdateResult:
        """Append a note to a client's progress log."""
        text = (text or "").strip()
        if not text:
            raise ValidationError(required_field("Progress note"))

        client = self.get_client(client_id)
        if client is None or not can_view(session.staff, client):
            logger.warning("Client %s not found for progress entry", client_id)
            return NotFound(Collection.CLIENTS, client_id)

        entry = ProgressLogEntry(
            id=f"prog-{uuid.uuid4().hex[:12]}",
            author=session.handle,
            timestamp=self.clock(),
            text=text,
        )
        log = [mappers.progress_entry_to_document(e) for e in client.progress_log + (entry,)]
        try:
            self.store.update_document(Collection.CLIENTS, client_id, {"progress_log": log})
        except NotFoundError:
            return NotFound(Collection.CLIENTS, client_id)
        return Updated(Collection.CLIENTS, client_id)
