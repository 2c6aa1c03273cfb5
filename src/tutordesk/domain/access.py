"""Role-scoped visibility and edit rules.

Administrators see and change everything. Regular staff only see the
clients, events and tasks that are theirs, the notices addressed to them,
and their own staff profile. Billing, misc income and general expenses are
administrator-only.

These rules are applied after reading from the record store; the store
itself does not enforce them.
"""

from typing import Iterable, TypeVar

from tutordesk.domain.entities import (
    CalendarEvent,
    Client,
    Notice,
    Record,
    StaffMember,
    Task,
)
from tutordesk.domain.errors import PermissionDeniedError, admin_required

R = TypeVar("R")

# Navigation views and whether regular staff may open them
VIEWS: dict[str, bool] = {
    "dashboard": True,
    "schedule": True,
    "clients": True,
    "tasks": True,
    "profile": True,
    "staff": False,
    "financial": False,
    "reports": False,
}


def _is_addressed_to(notice: Notice, handle: str) -> bool:
    return notice.recipients is None or handle in notice.recipients


def can_view(staff: StaffMember, record: Record) -> bool:
    """Decide whether a staff member may see a record."""
    if staff.is_admin:
        return True

    if isinstance(record, (Client, CalendarEvent)):
        return record.staff_handle == staff.handle
    if isinstance(record, Task):
        return staff.handle in record.assignees
    if isinstance(record, Notice):
        return record.author == staff.handle or _is_addressed_to(record, staff.handle)
    if isinstance(record, StaffMember):
        return record.id == staff.id
    # Billing entries, misc income and expenses are administrator-only
    return False


def can_edit(staff: StaffMember, record: Record) -> bool:
    """Decide whether a staff member may change or delete a record."""
    if staff.is_admin:
        return True

    if isinstance(record, Notice):
        return record.author == staff.handle
    return can_view(staff, record)


def filter_visible(staff: StaffMember, records: Iterable[R]) -> list[R]:
    """Keep only the records a staff member may see."""
    return [record for record in records if can_view(staff, record)]


def can_open_view(staff: StaffMember, view: str) -> bool:
    """Decide whether a navigation view is available to a staff member."""
    if view not in VIEWS:
        return False
    return staff.is_admin or VIEWS[view]


def require_admin(staff: StaffMember) -> None:
    """Raise PermissionDeniedError unless the staff member is an administrator."""
    if not staff.is_admin:
        raise PermissionDeniedError(admin_required())
