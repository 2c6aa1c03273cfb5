"""Tests for staff service."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from tutordesk.domain.entities import NotFound, RecordStatus, Role, ServiceRate, Updated
from tutordesk.domain.errors import (
    AuthError,
    ConflictError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from tutordesk.domain.staff import staff_id_for


def test_staff_id_for():
    assert staff_id_for("bruno.costa") == "staff-bruno-costa"


def test_bootstrap_admin(admin):
    assert admin.role == Role.ADMIN
    assert admin.id == "staff-gabriella"
    assert admin.email == "gabriella@example.com"


def test_bootstrap_only_once(staff_service, admin):
    with pytest.raises(ConflictError):
        staff_service.bootstrap_admin("other", "Other", "other@example.com", "secret")


def test_create_staff(staff_service, regular_staff):
    """Test creating a regular staff member with rates."""
    stored = staff_service.get_by_handle("Bruno.Costa")

    assert stored == regular_staff
    assert stored.role == Role.REGULAR
    assert stored.service_rates[0] == ServiceRate("math", Decimal("80"))
    assert staff_service.get_by_email("BRUNO@example.com") == regular_staff


def test_create_staff_requires_password(staff_service, admin_session, identity_provider):
    """Test validation happens before any account is created."""
    with pytest.raises(ValidationError):
        staff_service.create_staff(admin_session, "lia", "Lia Rocha", "lia@example.com", "")

    assert staff_service.get_by_handle("lia") is None
    with pytest.raises(AuthError):
        identity_provider.sign_in("lia@example.com", "")


def test_create_staff_duplicate_handle(staff_service, admin_session, regular_staff):
    with pytest.raises(ConflictError):
        staff_service.create_staff(admin_session, "bruno.costa", "Bruno", "other@example.com", "secret")


def test_create_staff_handle_sharing_record_id(staff_service, admin_session, regular_staff, identity_provider):
    """Test a handle that maps onto an existing record ID is rejected."""
    assert staff_id_for("bruno-costa") == regular_staff.id

    with pytest.raises(ConflictError):
        staff_service.create_staff(admin_session, "bruno-costa", "Bruno C", "bc@example.com", "secret")

    assert staff_service.get_staff(regular_staff.id) == regular_staff
    with pytest.raises(AuthError):
        identity_provider.sign_in("bc@example.com", "secret")


def test_create_staff_duplicate_email(staff_service, admin_session, regular_staff):
    with pytest.raises(ConflictError):
        staff_service.create_staff(admin_session, "bruno2", "Bruno", "bruno@example.com", "secret")


def test_regular_staff_cannot_create_staff(staff_service, staff_session):
    with pytest.raises(PermissionDeniedError):
        staff_service.create_staff(staff_session, "lia", "Lia", "lia@example.com", "secret")


def test_list_staff_scoped(staff_service, admin_session, staff_session):
    assert [s.handle for s in staff_service.list_staff(admin_session)] == ["bruno.costa", "gabriella"]
    assert [s.handle for s in staff_service.list_staff(staff_session)] == ["bruno.costa"]


def test_update_own_profile(staff_service, staff_session, regular_staff):
    result = staff_service.update_profile(staff_session, regular_staff.id, phone="+55 11 99999-0000")

    assert isinstance(result, Updated)
    assert staff_service.get_staff(regular_staff.id).phone == "+55 11 99999-0000"


def test_regular_staff_cannot_change_role(staff_service, staff_session, regular_staff):
    with pytest.raises(PermissionDeniedError):
        staff_service.update_profile(staff_session, regular_staff.id, role=Role.ADMIN)


def test_regular_staff_cannot_edit_others(staff_service, staff_session, admin):
    with pytest.raises(PermissionDeniedError):
        staff_service.update_profile(staff_session, admin.id, name="Someone")


def test_admin_deactivates_staff(staff_service, admin_session, regular_staff):
    staff_service.update_profile(admin_session, regular_staff.id, status=RecordStatus.INACTIVE)

    assert staff_service.get_staff(regular_staff.id).status == RecordStatus.INACTIVE
    assert staff_service.list_staff(admin_session, active_only=True)[0].handle == "gabriella"


def test_update_missing_profile(staff_service, admin_session):
    assert isinstance(staff_service.update_profile(admin_session, "staff-nobody", name="X"), NotFound)


def test_create_staff_store_failure_drops_account(staff_service, admin_session, identity_provider, temp_db, monkeypatch):
    """Test a failed staff write leaves no sign-in account behind."""
    session = temp_db._get_session()

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)
    with pytest.raises(StoreError):
        staff_service.create_staff(admin_session, "lia", "Lia Rocha", "lia@example.com", "secret")
    monkeypatch.undo()

    assert staff_service.get_by_handle("lia") is None
    with pytest.raises(AuthError):
        identity_provider.sign_in("lia@example.com", "secret")

    lia = staff_service.create_staff(admin_session, "lia", "Lia Rocha", "lia@example.com", "secret")
    assert staff_service.get_by_email("lia@example.com") == lia
