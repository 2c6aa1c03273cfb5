"""Shared pytest fixtures for tutordesk tests."""

import os
import tempfile
from datetime import datetime, timedelta, UTC
from decimal import Decimal

import pytest

from tutordesk.database.factories import create_identity_provider, create_sqlite_store
from tutordesk.domain.billing import BillingService
from tutordesk.domain.clients import ClientService
from tutordesk.domain.entities import ServiceRate
from tutordesk.domain.ledger import LedgerService
from tutordesk.domain.notices import NoticeService
from tutordesk.domain.reports import ReportService
from tutordesk.domain.schedule import ScheduleService
from tutordesk.domain.session import Session, SessionManager
from tutordesk.domain.staff import StaffService
from tutordesk.domain.tasks import TaskService

ADMIN_EMAIL = "gabriella@example.com"
ADMIN_PASSWORD = "admin-secret"
STAFF_EMAIL = "bruno@example.com"
STAFF_PASSWORD = "staff-secret"


class FixedClock:
    """Clock returning increasing timestamps one minute apart."""

    def __init__(self, start: datetime = datetime(2024, 5, 10, 9, 0, tzinfo=UTC)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture
def temp_db():
    """Create a temporary record store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()

    yield store

    # Cleanup
    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def identity_provider(temp_db):
    """Identity provider with a low bcrypt cost to keep tests fast."""
    return create_identity_provider(temp_db, rounds=4)


@pytest.fixture
def session_manager(temp_db, identity_provider):
    """Create a SessionManager over the temporary store."""
    manager = SessionManager(temp_db, identity_provider)
    yield manager
    manager.close()


@pytest.fixture
def staff_service(temp_db, identity_provider):
    """Create a StaffService with a temporary store."""
    return StaffService(temp_db, identity_provider)


@pytest.fixture
def client_service(temp_db):
    """Create a ClientService with a temporary store."""
    return ClientService(temp_db, clock=FixedClock())


@pytest.fixture
def billing_service(temp_db):
    """Create a BillingService with a temporary store."""
    return BillingService(temp_db)


@pytest.fixture
def schedule_service(temp_db):
    """Create a ScheduleService with a temporary store."""
    return ScheduleService(temp_db)


@pytest.fixture
def notice_service(temp_db):
    """Create a NoticeService with a temporary store."""
    return NoticeService(temp_db, clock=FixedClock())


@pytest.fixture
def task_service(temp_db):
    """Create a TaskService with a temporary store."""
    return TaskService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary store."""
    return LedgerService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary store."""
    return ReportService(temp_db)


@pytest.fixture
def admin(staff_service):
    """The first administrator, gabriella."""
    return staff_service.bootstrap_admin(
        handle="gabriella", name="Gabriella Souza", email=ADMIN_EMAIL, password=ADMIN_PASSWORD
    )


@pytest.fixture
def admin_session(admin, identity_provider):
    """Session of the administrator."""
    return Session(staff=admin, identity=identity_provider.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def regular_staff(staff_service, admin_session):
    """A regular staff member, bruno.costa."""
    return staff_service.create_staff(
        admin_session,
        handle="bruno.costa",
        name="Bruno Costa",
        email=STAFF_EMAIL,
        password=STAFF_PASSWORD,
        service_rates=[
            ServiceRate(service_type="math", hourly_rate=Decimal("80")),
            ServiceRate(service_type="remedial", hourly_rate=Decimal("60")),
        ],
    )


@pytest.fixture
def staff_session(regular_staff, identity_provider):
    """Session of the regular staff member."""
    return Session(staff=regular_staff, identity=identity_provider.sign_in(STAFF_EMAIL, STAFF_PASSWORD))


@pytest.fixture
def sample_clients(client_service, admin_session, regular_staff):
    """Two active paying clients: one for bruno.costa, one for gabriella."""
    ana = client_service.create_client(
        admin_session,
        name="Ana Lima",
        staff_handle="bruno.costa",
        service="Tutoring - Math",
        monthly_fee=Decimal("450"),
    )
    pedro = client_service.create_client(
        admin_session,
        name="Pedro Alves",
        staff_handle="gabriella",
        service="Speech Therapy",
        monthly_fee=Decimal("300"),
    )
    return {"ana": ana, "pedro": pedro}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
