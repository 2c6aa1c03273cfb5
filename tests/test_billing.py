"""Tests for monthly billing generation and billing entries."""

from decimal import Decimal
from itertools import count

import pytest
from sqlalchemy.exc import OperationalError

from tutordesk.domain.billing import monthly_fee_description, plan_monthly_entries, qualifying_clients
from tutordesk.domain.entities import (
    BillingEntry,
    BillingStatus,
    Client,
    NotFound,
    RecordStatus,
    Updated,
)
from tutordesk.domain.errors import (
    BatchCommitFailure,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


def _client(client_id, fee="450", status=RecordStatus.ACTIVE):
    return Client(
        id=client_id,
        name=client_id.title(),
        status=status,
        staff_handle="bruno.costa",
        service="Tutoring - Math",
        monthly_fee=Decimal(fee),
    )


def _ids():
    counter = count(1)
    return lambda: f"entry-{next(counter)}"


def test_plan_creates_pending_entry_per_paying_client():
    """Test planning entries for active clients with a fee."""
    roster = [_client("ana", "450"), _client("pedro", "300")]

    outcome = plan_monthly_entries(roster, [], 4, 2024, _ids())

    assert outcome.period == "2024-05"
    assert outcome.created_count == 2
    assert [e.amount for e in outcome.created] == [Decimal("450"), Decimal("300")]
    assert all(e.status == BillingStatus.PENDING for e in outcome.created)
    assert all(e.description == "Monthly fee 2024-05" for e in outcome.created)


def test_plan_skips_clients_already_billed():
    """Test that clients with an entry for the period are skipped."""
    roster = [_client("ana"), _client("pedro", "300")]
    existing = [
        BillingEntry("e1", "ana", "Monthly fee 2024-05", Decimal("450"), "2024-05", BillingStatus.PAID),
        BillingEntry("e2", "pedro", "Monthly fee 2024-04", Decimal("300"), "2024-04", BillingStatus.PAID),
    ]

    outcome = plan_monthly_entries(roster, existing, 4, 2024, _ids())

    assert [e.client_id for e in outcome.created] == ["pedro"]
    assert outcome.skipped_existing == 1


def test_plan_ignores_inactive_and_free_clients():
    """Test that inactive clients and zero fees produce nothing."""
    roster = [_client("ana", status=RecordStatus.INACTIVE), _client("pedro", "0")]

    outcome = plan_monthly_entries(roster, [], 0, 2024, _ids())

    assert outcome.nothing_to_generate
    assert outcome.created == ()
    assert outcome.period == "2024-01"


def test_plan_duplicate_roster_ids_produce_one_entry():
    """Test that a client listed twice is billed once."""
    roster = [_client("ana"), _client("ana")]

    outcome = plan_monthly_entries(roster, [], 4, 2024, _ids())

    assert outcome.created_count == 1
    assert len(qualifying_clients(roster)) == 1


def test_plan_rejects_month_out_of_range():
    """Test that the zero-based month must be 0..11."""
    with pytest.raises(ValidationError):
        plan_monthly_entries([_client("ana")], [], 12, 2024, _ids())


def test_monthly_fee_description():
    assert monthly_fee_description("2024-05") == "Monthly fee 2024-05"


def test_generate_may_2024(billing_service, admin_session, sample_clients):
    """Test generating May 2024 for two paying clients."""
    outcome = billing_service.generate_monthly_entries(admin_session, 4, 2024)

    assert outcome.period == "2024-05"
    assert outcome.created_count == 2

    entries = billing_service.list_entries(admin_session, period="2024-05")
    by_client = {e.client_id: e for e in entries}
    assert by_client[sample_clients["ana"].id].amount == Decimal("450")
    assert by_client[sample_clients["pedro"].id].amount == Decimal("300")
    assert all(e.status == BillingStatus.PENDING for e in entries)


def test_generate_is_idempotent(billing_service, admin_session, sample_clients):
    """Test that a second run for the same month creates nothing."""
    billing_service.generate_monthly_entries(admin_session, 4, 2024)
    second = billing_service.generate_monthly_entries(admin_session, 4, 2024)

    assert second.created_count == 0
    assert second.skipped_existing == 2
    assert len(billing_service.list_entries(admin_session, period="2024-05")) == 2


def test_generate_keeps_one_entry_per_client_and_period(billing_service, admin_session, sample_clients):
    """Test uniqueness across a manual entry and a generation run."""
    ana = sample_clients["ana"]
    billing_service.add_entry(admin_session, ana.id, Decimal("100"), "2024-06")

    outcome = billing_service.generate_for_period(admin_session, "2024-06")

    assert outcome.created_count == 1
    entries = billing_service.list_entries(admin_session, period="2024-06")
    assert sorted(e.client_id for e in entries) == sorted([ana.id, sample_clients["pedro"].id])


def test_generate_with_no_paying_clients(billing_service, admin_session):
    """Test that generation without paying clients writes nothing."""
    outcome = billing_service.generate_monthly_entries(admin_session, 4, 2024)

    assert outcome.nothing_to_generate
    assert billing_service.list_entries(admin_session) == []


def test_generate_requires_admin(billing_service, staff_session, sample_clients):
    with pytest.raises(PermissionDeniedError):
        billing_service.generate_monthly_entries(staff_session, 4, 2024)


def test_generate_batch_failure_writes_nothing(billing_service, admin_session, sample_clients, temp_db, monkeypatch):
    """Test that a failed batch commit leaves no entries behind."""
    session = temp_db._get_session()

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)
    with pytest.raises(BatchCommitFailure):
        billing_service.generate_monthly_entries(admin_session, 4, 2024)
    monkeypatch.undo()

    assert billing_service.list_entries(admin_session) == []


def test_add_entry_rejects_duplicate_period(billing_service, admin_session, sample_clients):
    ana = sample_clients["ana"]
    billing_service.add_entry(admin_session, ana.id, Decimal("450"), "2024-05")

    with pytest.raises(ConflictError):
        billing_service.add_entry(admin_session, ana.id, Decimal("450"), "2024-5")


def test_add_entry_unknown_client(billing_service, admin_session):
    with pytest.raises(NotFoundError):
        billing_service.add_entry(admin_session, "missing", Decimal("450"), "2024-05")


def test_add_entry_rejects_non_positive_amount(billing_service, admin_session, sample_clients):
    with pytest.raises(ValidationError):
        billing_service.add_entry(admin_session, sample_clients["ana"].id, Decimal("0"), "2024-05")


def test_update_entry_status(billing_service, admin_session, sample_clients):
    """Test marking an entry as paid."""
    entry_id = billing_service.add_entry(admin_session, sample_clients["ana"].id, Decimal("450"), "2024-05")

    result = billing_service.update_entry_status(admin_session, entry_id, BillingStatus.PAID)

    assert isinstance(result, Updated)
    assert billing_service.list_entries(admin_session, status=BillingStatus.PAID)[0].id == entry_id


def test_update_missing_entry_returns_not_found(billing_service, admin_session):
    result = billing_service.update_entry_status(admin_session, "missing", BillingStatus.PAID)

    assert isinstance(result, NotFound)
    assert result.doc_id == "missing"


def test_outstanding_entries_oldest_first(billing_service, admin_session, sample_clients):
    """Test outstanding payments exclude paid entries and sort by period."""
    ana, pedro = sample_clients["ana"], sample_clients["pedro"]
    billing_service.add_entry(admin_session, ana.id, Decimal("450"), "2024-06")
    billing_service.add_entry(admin_session, pedro.id, Decimal("300"), "2024-04", status=BillingStatus.OVERDUE)
    paid = billing_service.add_entry(admin_session, ana.id, Decimal("450"), "2024-03")
    billing_service.update_entry_status(admin_session, paid, BillingStatus.PAID)

    outstanding = billing_service.outstanding_entries(admin_session)

    assert [e.period for e in outstanding] == ["2024-04", "2024-06"]
