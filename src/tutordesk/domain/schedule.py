"""Calendar event domain service."""

import re
from dataclasses import replace
from datetime import date
from typing import Optional

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import can_edit, can_view, filter_visible
from tutordesk.domain.entities import (
    CalendarEvent,
    Collection,
    EventStatus,
    NotFound,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    client_not_found,
    record_not_editable,
)
from tutordesk.domain.session import Session
from tutordesk.logging_config import get_logger

logger = get_logger("domain.schedule")

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Allowed lifecycle moves; completed and cancelled are terminal
TRANSITIONS: dict[EventStatus, set[EventStatus]] = {
    EventStatus.SCHEDULED: {EventStatus.COMPLETED, EventStatus.CANCELLED},
    EventStatus.COMPLETED: set(),
    EventStatus.CANCELLED: set(),
}


class ScheduleService:
    """Service for scheduling sessions."""

    def __init__(self, store: RecordStore):
        """Initialize schedule service.

        Args:
            store: Record store instance
        """
        self.store = store

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        """Get event by ID."""
        doc = self.store.get_document(Collection.EVENTS, event_id)
        if doc is None:
            return None
        return mappers.event_to_domain(doc)

    def schedule_event(
        self,
        session: Session,
        client_id: str,
        on_date: date,
        time: str,
        notes: Optional[str] = None,
    ) -> CalendarEvent:
        """Schedule a session with a client.

        The owning staff member and service are taken from the client, so a
        regular staff member can only schedule their own clients.

        Raises:
            ValidationError: If the time is not HH:MM
            NotFoundError: If the client does not exist or is not visible
        """
        if not _TIME_RE.match(time or ""):
            raise ValidationError(f"Time must be HH:MM, got '{time}'")

        doc = self.store.get_document(Collection.CLIENTS, client_id)
        client = mappers.client_to_domain(doc) if doc is not None else None
        if client is None or not can_view(session.staff, client):
            raise NotFoundError(client_not_found(client_id))

        event = CalendarEvent(
            id=self.store.new_id(Collection.EVENTS),
            client_id=client.id,
            staff_handle=client.staff_handle,
            title=client.name,
            date=on_date,
            time=time,
            status=EventStatus.SCHEDULED,
            service=client.service,
            notes=notes,
        )
        self.store.insert_document(Collection.EVENTS, event.id, mappers.event_to_document(event))
        return event

    def _transition(self, session: Session, event_id: str, status: EventStatus) -> UpdateResult:
        event = self.get_event(event_id)
        if event is None or not can_view(session.staff, event):
            logger.warning("Event %s not found for %s", event_id, status.value)
            return NotFound(Collection.EVENTS, event_id)
        if status not in TRANSITIONS[event.status]:
            raise ValidationError(
                f"Cannot change event {event_id} from {event.status.value} to {status.value}"
            )

        try:
            self.store.update_document(Collection.EVENTS, event_id, {"status": status.value})
        except NotFoundError:
            return NotFound(Collection.EVENTS, event_id)
        return Updated(Collection.EVENTS, event_id)

    def complete_event(self, session: Session, event_id: str) -> UpdateResult:
        """Mark a scheduled session as held."""
        return self._transition(session, event_id, EventStatus.COMPLETED)

    def cancel_event(self, session: Session, event_id: str) -> UpdateResult:
        """Mark a scheduled session as cancelled."""
        return self._transition(session, event_id, EventStatus.CANCELLED)

    def reschedule_event(self, session: Session, event_id: str, on_date: date, time: str) -> UpdateResult:
        """Move a still-scheduled session to another date and time."""
        if not _TIME_RE.match(time or ""):
            raise ValidationError(f"Time must be HH:MM, got '{time}'")
        event = self.get_event(event_id)
        if event is None or not can_view(session.staff, event):
            return NotFound(Collection.EVENTS, event_id)
        if event.status != EventStatus.SCHEDULED:
            raise ValidationError(f"Event {event_id} is {event.status.value} and cannot be moved")

        moved = replace(event, date=on_date, time=time)
        try:
            self.store.update_document(Collection.EVENTS, event_id, mappers.event_to_document(moved))
        except NotFoundError:
            return NotFound(Collection.EVENTS, event_id)
        return Updated(Collection.EVENTS, event_id)

    def delete_event(self, session: Session, event_id: str) -> UpdateResult:
        """Delete an event."""
        event = self.get_event(event_id)
        if event is None:
            return NotFound(Collection.EVENTS, event_id)
        if not can_edit(session.staff, event):
            raise PermissionDeniedError(record_not_editable("event", event_id))
        if not self.store.delete_document(Collection.EVENTS, event_id):
            return NotFound(Collection.EVENTS, event_id)
        return Updated(Collection.EVENTS, event_id)

    def list_events(
        self,
        session: Session,
        on_date: Optional[date] = None,
        from_date: Optional[date] = None,
        status: Optional[EventStatus] = None,
    ) -> list[CalendarEvent]:
        """Events visible to the session, by date and time.

        Args:
            session: Current session
            on_date: Only events on this day (today's agenda)
            from_date: Only events on or after this day (upcoming)
            status: Only events with this status
        """
        events = [mappers.event_to_domain(doc) for doc in self.store.list_documents(Collection.EVENTS)]
        events = filter_visible(session.staff, events)
        if on_date is not None:
            events = [e for e in events if e.date == on_date]
        if from_date is not None:
            events = [e for e in events if e.date >= from_date]
        if status is not None:
            events = [e for e in events if e.status == status]
        return sorted(events, key=lambda e: (e.date, e.time))
