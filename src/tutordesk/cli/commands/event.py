"""Session scheduling commands."""

from datetime import date

import click
from tutordesk.domain.entities import EventStatus
from tutordesk.domain.schedule import ScheduleService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session
from tutordesk.utils.date_parser import parse_date, parse_time


@click.group()
def event_group():
    """Schedule and track sessions."""
    pass


@event_group.command("schedule")
@click.argument("client_id")
@click.argument("day", metavar="DATE")
@click.argument("time")
@click.option("--notes", help="Notes for the session")
@click.pass_context
def schedule_event(ctx, client_id: str, day: str, time: str, notes: str | None) -> None:
    """Schedule a session with a client.

    Examples:
        tutordesk event schedule 3f2a9c1e 2024-05-10 14:00
        tutordesk event schedule 3f2a9c1e "next friday" 9:30
    """
    session = require_session(ctx)
    service = ScheduleService(ctx.obj["store"])

    try:
        event = service.schedule_event(session, client_id, parse_date(day), parse_time(time), notes=notes)
        click.echo(f"Scheduled '{event.title}' on {event.date.isoformat()} at {event.time} (ID: {event.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


def _change(ctx, event_id: str, action: str) -> None:
    session = require_session(ctx)
    service = ScheduleService(ctx.obj["store"])
    handlers = {
        "complete": (service.complete_event, "Marked event as completed"),
        "cancel": (service.cancel_event, "Cancelled event"),
        "delete": (service.delete_event, "Deleted event"),
    }
    operation, message = handlers[action]

    try:
        result = operation(session, event_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, message)


@event_group.command("complete")
@click.argument("event_id")
@click.pass_context
def complete_event(ctx, event_id: str) -> None:
    """Mark a scheduled session as held."""
    _change(ctx, event_id, "complete")


@event_group.command("cancel")
@click.argument("event_id")
@click.pass_context
def cancel_event(ctx, event_id: str) -> None:
    """Cancel a scheduled session."""
    _change(ctx, event_id, "cancel")


@event_group.command("delete")
@click.argument("event_id")
@click.pass_context
def delete_event(ctx, event_id: str) -> None:
    """Delete a session."""
    _change(ctx, event_id, "delete")


@event_group.command("reschedule")
@click.argument("event_id")
@click.argument("day", metavar="DATE")
@click.argument("time")
@click.pass_context
def reschedule_event(ctx, event_id: str, day: str, time: str) -> None:
    """Move a scheduled session to another date and time."""
    session = require_session(ctx)
    service = ScheduleService(ctx.obj["store"])

    try:
        result = service.reschedule_event(session, event_id, parse_date(day), parse_time(time))
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Rescheduled event")


@event_group.command("list")
@click.option("--today", is_flag=True, help="Only today's sessions")
@click.option("--on", "on_date", help="Only sessions on this date")
@click.option("--from", "from_date", help="Only sessions on or after this date")
@click.option("--status", type=click.Choice([s.value for s in EventStatus]), help="Only sessions with this status")
@click.pass_context
def list_events(ctx, today: bool, on_date: str | None, from_date: str | None, status: str | None) -> None:
    """List sessions you can see, by date and time."""
    session = require_session(ctx)
    service = ScheduleService(ctx.obj["store"])

    if today and on_date:
        click.echo("Error: --today cannot be combined with --on.", err=True)
        ctx.exit(1)

    try:
        on = date.today() if today else (parse_date(on_date) if on_date else None)
        start = parse_date(from_date) if from_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    events = service.list_events(
        session, on_date=on, from_date=start, status=EventStatus(status) if status else None
    )
    if not events:
        click.echo("No sessions found.")
        return

    click.echo("\nSessions:")
    click.echo("-" * 90)
    for e in events:
        click.echo(
            f"{e.id[:8]} | {e.date.isoformat()} {e.time} | {e.title:22s} | {e.service:20s} | "
            f"{e.staff_handle:14s} | {e.status.value}"
        )


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
