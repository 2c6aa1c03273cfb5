"""Tests for session scheduling."""

from datetime import date

import pytest

from tutordesk.domain.entities import EventStatus, NotFound, Updated
from tutordesk.domain.errors import NotFoundError, ValidationError


def test_schedule_copies_owner_and_service(schedule_service, staff_session, sample_clients):
    """Test that owner and service come from the client."""
    ana = sample_clients["ana"]

    event = schedule_service.schedule_event(staff_session, ana.id, date(2024, 5, 10), "14:00")

    assert event.staff_handle == "bruno.costa"
    assert event.service == "Tutoring - Math"
    assert event.title == "Ana Lima"
    assert event.status == EventStatus.SCHEDULED
    assert schedule_service.get_event(event.id) == event


def test_regular_staff_cannot_schedule_other_clients(schedule_service, staff_session, sample_clients):
    with pytest.raises(NotFoundError):
        schedule_service.schedule_event(staff_session, sample_clients["pedro"].id, date(2024, 5, 10), "14:00")


def test_schedule_rejects_bad_time(schedule_service, admin_session, sample_clients):
    with pytest.raises(ValidationError):
        schedule_service.schedule_event(admin_session, sample_clients["ana"].id, date(2024, 5, 10), "25:00")


def test_complete_and_cancel_are_terminal(schedule_service, staff_session, sample_clients):
    """Test the event lifecycle."""
    ana = sample_clients["ana"]
    held = schedule_service.schedule_event(staff_session, ana.id, date(2024, 5, 10), "14:00")
    dropped = schedule_service.schedule_event(staff_session, ana.id, date(2024, 5, 17), "14:00")

    assert isinstance(schedule_service.complete_event(staff_session, held.id), Updated)
    assert isinstance(schedule_service.cancel_event(staff_session, dropped.id), Updated)

    with pytest.raises(ValidationError):
        schedule_service.cancel_event(staff_session, held.id)
    with pytest.raises(ValidationError):
        schedule_service.complete_event(staff_session, dropped.id)

    assert schedule_service.get_event(held.id).status == EventStatus.COMPLETED
    assert schedule_service.get_event(dropped.id).status == EventStatus.CANCELLED


def test_complete_missing_event(schedule_service, admin_session):
    assert isinstance(schedule_service.complete_event(admin_session, "missing"), NotFound)


def test_reschedule_only_scheduled(schedule_service, admin_session, sample_clients):
    event = schedule_service.schedule_event(admin_session, sample_clients["ana"].id, date(2024, 5, 10), "14:00")

    assert isinstance(schedule_service.reschedule_event(admin_session, event.id, date(2024, 5, 11), "09:30"), Updated)
    moved = schedule_service.get_event(event.id)
    assert (moved.date, moved.time) == (date(2024, 5, 11), "09:30")

    schedule_service.complete_event(admin_session, event.id)
    with pytest.raises(ValidationError):
        schedule_service.reschedule_event(admin_session, event.id, date(2024, 5, 12), "09:30")


def test_delete_event(schedule_service, staff_session, sample_clients):
    event = schedule_service.schedule_event(staff_session, sample_clients["ana"].id, date(2024, 5, 10), "14:00")

    assert isinstance(schedule_service.delete_event(staff_session, event.id), Updated)
    assert schedule_service.get_event(event.id) is None
    assert isinstance(schedule_service.delete_event(staff_session, event.id), NotFound)


def test_list_events_sorted_and_filtered(schedule_service, admin_session, staff_session, sample_clients):
    """Test agenda and upcoming filters."""
    ana, pedro = sample_clients["ana"], sample_clients["pedro"]
    late = schedule_service.schedule_event(admin_session, ana.id, date(2024, 5, 10), "16:00")
    early = schedule_service.schedule_event(admin_session, ana.id, date(2024, 5, 10), "08:00")
    next_week = schedule_service.schedule_event(admin_session, ana.id, date(2024, 5, 17), "08:00")
    other = schedule_service.schedule_event(admin_session, pedro.id, date(2024, 5, 10), "10:00")

    assert [e.id for e in schedule_service.list_events(staff_session)] == [early.id, late.id, next_week.id]
    assert [e.id for e in schedule_service.list_events(admin_session, on_date=date(2024, 5, 10))] == [
        early.id,
        other.id,
        late.id,
    ]
    assert [e.id for e in schedule_service.list_events(admin_session, from_date=date(2024, 5, 11))] == [next_week.id]
