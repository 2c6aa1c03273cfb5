"""Domain model entities for tutordesk.

These are pure data classes representing business concepts, independent of
how the record store lays out its documents. Services and the access policy
only ever see these types; the database layer maps them to and from plain
documents.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class Collection(str, Enum):
    """Record store collections."""

    STAFF = "staff"
    CLIENTS = "clients"
    EVENTS = "events"
    NOTICES = "notices"
    BILLING_ENTRIES = "billing_entries"
    MISC_INCOMES = "misc_incomes"
    GENERAL_EXPENSES = "general_expenses"
    TASKS = "tasks"


class Role(str, Enum):
    """Staff role."""

    ADMIN = "admin"
    REGULAR = "regular"


class RecordStatus(str, Enum):
    """Active/inactive flag shared by staff and clients."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class EventStatus(str, Enum):
    """Calendar event lifecycle."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BillingStatus(str, Enum):
    """Billing entry payment status."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class ExpenseStatus(str, Enum):
    """General expense payment status."""

    PAID = "paid"
    PENDING = "pending"


class TaskStatus(str, Enum):
    """Task board column."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


@dataclass(frozen=True)
class ServiceRate:
    """Hourly rate a staff member charges for one service type."""

    service_type: str
    hourly_rate: Decimal


@dataclass(frozen=True)
class StaffMember:
    """Staff member (administrator or regular staff) domain entity."""

    id: str
    handle: str
    name: str
    email: str
    role: Role
    status: RecordStatus
    service_rates: tuple[ServiceRate, ...] = ()
    birth_date: Optional[date] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class ProgressLogEntry:
    """Immutable note appended to a client's progress log."""

    id: str
    author: str
    timestamp: datetime
    text: str


@dataclass(frozen=True)
class Client:
    """Client (student or patient) domain entity."""

    id: str
    name: str
    status: RecordStatus
    staff_handle: str
    service: str
    monthly_fee: Decimal
    progress_log: tuple[ProgressLogEntry, ...] = ()
    birth_date: Optional[date] = None
    guardian_name: Optional[str] = None
    guardian_contact: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    """Scheduled session between a staff member and a client."""

    id: str
    client_id: str
    staff_handle: str
    title: str
    date: date
    time: str
    status: EventStatus
    service: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class BillingEntry:
    """A single month's charge owed by one client."""

    id: str
    client_id: str
    description: str
    amount: Decimal
    period: str
    status: BillingStatus


@dataclass(frozen=True)
class MiscIncome:
    """Income not tied to a client's monthly fee."""

    id: str
    description: str
    amount: Decimal
    period: str


@dataclass(frozen=True)
class GeneralExpense:
    """Expense incurred by the practice in a period."""

    id: str
    description: str
    amount: Decimal
    period: str
    status: ExpenseStatus


@dataclass(frozen=True)
class Reaction:
    """Emoji reaction left by a staff member."""

    emoji: str
    user: str


@dataclass(frozen=True)
class Comment:
    """Comment on a notice."""

    id: str
    author: str
    content: str
    posted_at: datetime
    reactions: tuple[Reaction, ...] = ()


@dataclass(frozen=True)
class Notice:
    """Notice board post.

    ``recipients`` is None when the notice is addressed to everyone,
    otherwise the tuple of staff handles it is addressed to.
    """

    id: str
    author: str
    content: str
    posted_at: datetime
    recipients: Optional[tuple[str, ...]] = None
    reactions: tuple[Reaction, ...] = ()
    comments: tuple[Comment, ...] = ()


@dataclass(frozen=True)
class Task:
    """Task assigned to one or more staff members."""

    id: str
    title: str
    description: str
    assignees: tuple[str, ...]
    status: TaskStatus


Record = Union[
    StaffMember,
    Client,
    CalendarEvent,
    BillingEntry,
    MiscIncome,
    GeneralExpense,
    Notice,
    Task,
]


@dataclass(frozen=True)
class Updated:
    """A read-modify-write operation found its document and wrote it."""

    collection: Collection
    doc_id: str


@dataclass(frozen=True)
class NotFound:
    """A read-modify-write operation's document no longer exists."""

    collection: Collection
    doc_id: str


UpdateResult = Union[Updated, NotFound]


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of a monthly billing generation run."""

    period: str
    created: tuple[BillingEntry, ...] = ()
    skipped_existing: int = 0
    nothing_to_generate: bool = False

    @property
    def created_count(self) -> int:
        return len(self.created)


@dataclass(frozen=True)
class FinancialSummary:
    """Income, expense and balance for one period."""

    period: str
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class FinancialReport:
    """Revenue per service label and total expense."""

    revenue_by_service: dict[str, Decimal]
    total_expense: Decimal


@dataclass(frozen=True)
class StaffPerformance:
    """Completed sessions and estimated earnings for one staff member."""

    handle: str
    name: str
    completed_sessions: int
    estimated_earnings: Decimal


@dataclass(frozen=True)
class TimesheetLine:
    """One completed session on a staff timesheet."""

    event_id: str
    date: date
    client_name: str
    service: str
    earning: Decimal


@dataclass(frozen=True)
class Timesheet:
    """Completed sessions of a staff member in a period."""

    handle: str
    period: str
    lines: tuple[TimesheetLine, ...] = ()

    @property
    def completed_sessions(self) -> int:
        return len(self.lines)

    @property
    def total_earnings(self) -> Decimal:
        return sum((line.earning for line in self.lines), Decimal("0"))


@dataclass(frozen=True)
class ClientAnalytics:
    """Client counts per status and per service label."""

    status_counts: dict[str, int] = field(default_factory=dict)
    service_counts: dict[str, int] = field(default_factory=dict)
