"""Staff member domain service."""

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.database.identity import IdentityProvider
from tutordesk.domain.access import can_edit, filter_visible, require_admin
from tutordesk.domain.entities import (
    Collection,
    NotFound,
    RecordStatus,
    Role,
    ServiceRate,
    StaffMember,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
    admin_required,
    record_not_editable,
    required_field,
)
from tutordesk.domain.session import Session
from tutordesk.logging_config import get_logger

logger = get_logger("domain.staff")


def staff_id_for(handle: str) -> str:
    """Return the document ID used for a staff handle."""
    return f"staff-{handle.replace('.', '-')}"


class StaffService:
    """Service for managing staff members."""

    def __init__(self, store: RecordStore, identity_provider: IdentityProvider):
        """Initialize staff service.

        Args:
            store: Record store instance
            identity_provider: Identity provider used to create sign-in accounts
        """
        self.store = store
        self.identity_provider = identity_provider

    def _validate_new(self, handle: str, name: str, email: str, password: str) -> None:
        for label, value in (("Handle", handle), ("Name", name), ("Email", email), ("Password", password)):
            if not (value or "").strip():
                raise ValidationError(required_field(label))
        if self.get_by_handle(handle) is not None:
            raise ConflictError(f"Staff handle '{handle}' is already taken")
        if self.store.get_document(Collection.STAFF, staff_id_for(handle)) is not None:
            raise ConflictError(f"Staff handle '{handle}' clashes with an existing staff record")

    def _create(
        self,
        handle: str,
        name: str,
        email: str,
        password: str,
        role: Role,
        service_rates: Sequence[ServiceRate],
        birth_date: Optional[date],
        phone: Optional[str],
        address: Optional[str],
    ) -> StaffMember:
        handle = handle.strip()
        self._validate_new(handle, name, email, password)

        # Identity first: without it the staff record could never sign in
        identity = self.identity_provider.create_account(email, password)
        staff = StaffMember(
            id=staff_id_for(handle),
            handle=handle,
            name=name.strip(),
            email=identity.email,
            role=role,
            status=RecordStatus.ACTIVE,
            service_rates=tuple(service_rates),
            birth_date=birth_date,
            phone=phone,
            address=address,
        )
        try:
            self.store.insert_document(Collection.STAFF, staff.id, mappers.staff_to_document(staff))
        except StoreError:
            # Drop the account so the email can be registered again
            self.identity_provider.delete_account(identity.uid)
            raise
        logger.info("Created %s staff member %s", role.value, handle)
        return staff

    def create_staff(
        self,
        session: Session,
        handle: str,
        name: str,
        email: str,
        password: str,
        service_rates: Sequence[ServiceRate] = (),
        birth_date: Optional[date] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> StaffMember:
        """Register a new regular staff member with a sign-in account.

        Raises:
            PermissionDeniedError: If the session is not an administrator
            ValidationError: If a required field (including password) is empty
            ConflictError: If the handle, a handle with the same record ID,
                or the email is already registered
        """
        require_admin(session.staff)
        return self._create(
            handle, name, email, password, Role.REGULAR, service_rates, birth_date, phone, address
        )

    def bootstrap_admin(self, handle: str, name: str, email: str, password: str) -> StaffMember:
        """Create the first administrator of an empty installation.

        Raises:
            ConflictError: If any staff member already exists
        """
        if self.store.list_documents(Collection.STAFF):
            raise ConflictError("Staff already exist; sign in as an administrator instead")
        return self._create(handle, name, email, password, Role.ADMIN, (), None, None, None)

    def get_staff(self, staff_id: str) -> Optional[StaffMember]:
        """Get staff member by ID."""
        doc = self.store.get_document(Collection.STAFF, staff_id)
        if doc is None:
            return None
        return mappers.staff_to_domain(doc)

    def get_by_handle(self, handle: str) -> Optional[StaffMember]:
        """Get staff member by handle, ignoring case."""
        matches = self.store.query_documents(Collection.STAFF, {"handle_lowercase": handle.strip().lower()})
        if not matches:
            return None
        return mappers.staff_to_domain(matches[0])

    def get_by_email(self, email: str) -> Optional[StaffMember]:
        """Get staff member by email, ignoring case."""
        matches = self.store.query_documents(Collection.STAFF, {"email": email.strip().lower()})
        if not matches:
            return None
        return mappers.staff_to_domain(matches[0])

    def list_staff(self, session: Session, active_only: bool = False) -> list[StaffMember]:
        """List staff visible to the session, by name."""
        staff = [mappers.staff_to_domain(doc) for doc in self.store.list_documents(Collection.STAFF)]
        if active_only:
            staff = [s for s in staff if s.status == RecordStatus.ACTIVE]
        return sorted(filter_visible(session.staff, staff), key=lambda s: s.name.lower())

    def update_profile(
        self,
        session: Session,
        staff_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        birth_date: Optional[date] = None,
        service_rates: Optional[Sequence[ServiceRate]] = None,
        status: Optional[RecordStatus] = None,
        role: Optional[Role] = None,
    ) -> UpdateResult:
        """Edit a staff profile (own profile, or any profile as administrator).

        Role and status changes are administrator-only. The email and handle
        are fixed because sign-in maps identities to staff by email.
        """
        staff = self.get_staff(staff_id)
        if staff is None:
            logger.warning("Staff member %s not found for update", staff_id)
            return NotFound(Collection.STAFF, staff_id)
        if not can_edit(session.staff, staff):
            raise PermissionDeniedError(record_not_editable("staff member", staff_id))
        if (role is not None or status is not None) and not session.is_admin:
            raise PermissionDeniedError(admin_required())
        if name is not None and not name.strip():
            raise ValidationError(required_field("Name"))

        changes = {
            key: value
            for key, value in {
                "name": name.strip() if name is not None else None,
                "phone": phone,
                "address": address,
                "birth_date": birth_date,
                "service_rates": tuple(service_rates) if service_rates is not None else None,
                "status": status,
                "role": role,
            }.items()
            if value is not None
        }
        updated = replace(staff, **changes)
        try:
            self.store.update_document(Collection.STAFF, staff_id, mappers.staff_to_document(updated))
        except NotFoundError:
            return NotFound(Collection.STAFF, staff_id)
        return Updated(Collection.STAFF, staff_id)
