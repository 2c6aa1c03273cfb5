"""Mapper functions to convert between domain entities and store documents.

Documents are plain JSON-compatible dicts carrying their own "id". Amounts
are stored as decimal strings and dates as ISO strings, so the layout is the
same whichever backend holds the documents.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from tutordesk.domain import entities as domain
from tutordesk.domain.entities import Collection

ALL_RECIPIENTS = "all"


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(value)


def _datetime(value: str) -> datetime:
    # Tolerate the trailing "Z" of JavaScript ISO timestamps
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _reactions_to_domain(items: Optional[list[dict]]) -> tuple[domain.Reaction, ...]:
    return tuple(domain.Reaction(emoji=r["emoji"], user=r["user"]) for r in items or [])


def reactions_to_document(reactions) -> list[dict[str, str]]:
    """Convert reactions to their document form."""
    return [{"emoji": r.emoji, "user": r.user} for r in reactions]


def staff_to_domain(doc: dict[str, Any]) -> domain.StaffMember:
    """Convert a staff document to a StaffMember entity."""
    return domain.StaffMember(
        id=doc["id"],
        handle=doc["handle"],
        name=doc.get("name", doc["handle"]),
        email=doc["email"],
        role=domain.Role(doc.get("role", domain.Role.REGULAR.value)),
        status=domain.RecordStatus(doc.get("status", domain.RecordStatus.ACTIVE.value)),
        service_rates=tuple(
            domain.ServiceRate(
                service_type=r["service_type"], hourly_rate=_decimal(r.get("hourly_rate"))
            )
            for r in doc.get("service_rates", [])
        ),
        birth_date=_date(doc.get("birth_date")),
        phone=doc.get("phone"),
        address=doc.get("address"),
    )


def staff_to_document(staff: domain.StaffMember) -> dict[str, Any]:
    """Convert a StaffMember entity to a staff document."""
    return {
        "id": staff.id,
        "handle": staff.handle,
        "handle_lowercase": staff.handle.lower(),
        "name": staff.name,
        "email": staff.email.lower(),
        "role": staff.role.value,
        "status": staff.status.value,
        "service_rates": [
            {"service_type": r.service_type, "hourly_rate": str(r.hourly_rate)}
            for r in staff.service_rates
        ],
        "birth_date": _iso(staff.birth_date),
        "phone": staff.phone,
        "address": staff.address,
    }


def progress_entry_to_document(entry: domain.ProgressLogEntry) -> dict[str, str]:
    """Convert a progress log entry to its document form."""
    return {
        "id": entry.id,
        "author": entry.author,
        "timestamp": entry.timestamp.isoformat(),
        "text": entry.text,
    }


def client_to_domain(doc: dict[str, Any]) -> domain.Client:
    """Convert a client document to a Client entity."""
    return domain.Client(
        id=doc["id"],
        name=doc["name"],
        status=domain.RecordStatus(doc.get("status", domain.RecordStatus.ACTIVE.value)),
        staff_handle=doc.get("staff_handle", ""),
        service=doc.get("service", ""),
        monthly_fee=_decimal(doc.get("monthly_fee")),
        progress_log=tuple(
            domain.ProgressLogEntry(
                id=e["id"],
                author=e["author"],
                timestamp=_datetime(e["timestamp"]),
                text=e["text"],
            )
            for e in doc.get("progress_log", [])
        ),
        birth_date=_date(doc.get("birth_date")),
        guardian_name=doc.get("guardian_name"),
        guardian_contact=doc.get("guardian_contact"),
        notes=doc.get("notes"),
    )


def client_to_document(client: domain.Client) -> dict[str, Any]:
    """Convert a Client entity to a client document."""
    return {
        "id": client.id,
        "name": client.name,
        "status": client.status.value,
        "staff_handle": client.staff_handle,
        "service": client.service,
        "monthly_fee": str(client.monthly_fee),
        "progress_log": [progress_entry_to_document(e) for e in client.progress_log],
        "birth_date": _iso(client.birth_date),
        "guardian_name": client.guardian_name,
        "guardian_contact": client.guardian_contact,
        "notes": client.notes,
    }


def event_to_domain(doc: dict[str, Any]) -> domain.CalendarEvent:
    """Convert an event document to a CalendarEvent entity."""
    return domain.CalendarEvent(
        id=doc["id"],
        client_id=doc["client_id"],
        staff_handle=doc.get("staff_handle", ""),
        title=doc.get("title", ""),
        date=date.fromisoformat(doc["date"]),
        time=doc.get("time", "00:00"),
        status=domain.EventStatus(doc.get("status", domain.EventStatus.SCHEDULED.value)),
        service=doc.get("service", ""),
        notes=doc.get("notes"),
    )


def event_to_document(event: domain.CalendarEvent) -> dict[str, Any]:
    """Convert a CalendarEvent entity to an event document."""
    return {
        "id": event.id,
        "client_id": event.client_id,
        "staff_handle": event.staff_handle,
        "title": event.title,
        "date": event.date.isoformat(),
        "time": event.time,
        "status": event.status.value,
        "service": event.service,
        "notes": event.notes,
    }


def billing_entry_to_domain(doc: dict[str, Any]) -> domain.BillingEntry:
    """Convert a billing document to a BillingEntry entity."""
    return domain.BillingEntry(
        id=doc["id"],
        client_id=doc["client_id"],
        description=doc.get("description", ""),
        amount=_decimal(doc.get("amount")),
        period=doc.get("period", ""),
        status=domain.BillingStatus(doc.get("status", domain.BillingStatus.PENDING.value)),
    )


def billing_entry_to_document(entry: domain.BillingEntry) -> dict[str, Any]:
    """Convert a BillingEntry entity to a billing document."""
    return {
        "id": entry.id,
        "client_id": entry.client_id,
        "description": entry.description,
        "amount": str(entry.amount),
        "period": entry.period,
        "status": entry.status.value,
    }


def misc_income_to_domain(doc: dict[str, Any]) -> domain.MiscIncome:
    """Convert a misc income document to a MiscIncome entity."""
    return domain.MiscIncome(
        id=doc["id"],
        description=doc.get("description", ""),
        amount=_decimal(doc.get("amount")),
        period=doc.get("period", ""),
    )


def misc_income_to_document(income: domain.MiscIncome) -> dict[str, Any]:
    """Convert a MiscIncome entity to a misc income document."""
    return {
        "id": income.id,
        "description": income.description,
        "amount": str(income.amount),
        "period": income.period,
    }


def expense_to_domain(doc: dict[str, Any]) -> domain.GeneralExpense:
    """Convert an expense document to a GeneralExpense entity."""
    return domain.GeneralExpense(
        id=doc["id"],
        description=doc.get("description", ""),
        amount=_decimal(doc.get("amount")),
        period=doc.get("period", ""),
        status=domain.ExpenseStatus(doc.get("status", domain.ExpenseStatus.PENDING.value)),
    )


def expense_to_document(expense: domain.GeneralExpense) -> dict[str, Any]:
    """Convert a GeneralExpense entity to an expense document."""
    return {
        "id": expense.id,
        "description": expense.description,
        "amount": str(expense.amount),
        "period": expense.period,
        "status": expense.status.value,
    }


def comment_to_document(comment: domain.Comment) -> dict[str, Any]:
    """Convert a Comment entity to its document form."""
    return {
        "id": comment.id,
        "author": comment.author,
        "content": comment.content,
        "posted_at": comment.posted_at.isoformat(),
        "reactions": reactions_to_document(comment.reactions),
    }


def notice_to_domain(doc: dict[str, Any]) -> domain.Notice:
    """Convert a notice document to a Notice entity."""
    recipients = doc.get("recipients", ALL_RECIPIENTS)
    return domain.Notice(
        id=doc["id"],
        author=doc["author"],
        content=doc.get("content", ""),
        posted_at=_datetime(doc["posted_at"]),
        recipients=None if recipients == ALL_RECIPIENTS else tuple(recipients),
        reactions=_reactions_to_domain(doc.get("reactions")),
        comments=tuple(
            domain.Comment(
                id=c["id"],
                author=c["author"],
                content=c.get("content", ""),
                posted_at=_datetime(c["posted_at"]),
                reactions=_reactions_to_domain(c.get("reactions")),
            )
            for c in doc.get("comments", [])
        ),
    )


def notice_to_document(notice: domain.Notice) -> dict[str, Any]:
    """Convert a Notice entity to a notice document."""
    return {
        "id": notice.id,
        "author": notice.author,
        "content": notice.content,
        "posted_at": notice.posted_at.isoformat(),
        "recipients": ALL_RECIPIENTS if notice.recipients is None else list(notice.recipients),
        "reactions": reactions_to_document(notice.reactions),
        "comments": [comment_to_document(c) for c in notice.comments],
    }


def task_to_domain(doc: dict[str, Any]) -> domain.Task:
    """Convert a task document to a Task entity."""
    return domain.Task(
        id=doc["id"],
        title=doc.get("title", ""),
        description=doc.get("description", ""),
        assignees=tuple(doc.get("assignees", [])),
        status=domain.TaskStatus(doc.get("status", domain.TaskStatus.TODO.value)),
    )


def task_to_document(task: domain.Task) -> dict[str, Any]:
    """Convert a Task entity to a task document."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "assignees": list(task.assignees),
        "status": task.status.value,
    }


_TO_DOMAIN: dict[Collection, Callable[[dict[str, Any]], Any]] = {
    Collection.STAFF: staff_to_domain,
    Collection.CLIENTS: client_to_domain,
    Collection.EVENTS: event_to_domain,
    Collection.NOTICES: notice_to_domain,
    Collection.BILLING_ENTRIES: billing_entry_to_domain,
    Collection.MISC_INCOMES: misc_income_to_domain,
    Collection.GENERAL_EXPENSES: expense_to_domain,
    Collection.TASKS: task_to_domain,
}


def to_domain(collection: Collection, doc: dict[str, Any]):
    """Convert a document from any collection to its domain entity."""
    return _TO_DOMAIN[Collection(collection)](doc)
