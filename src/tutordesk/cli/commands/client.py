"""Client management commands."""

from dataclasses import replace

import click
from tutordesk.domain.clients import ClientService
from tutordesk.domain.entities import RecordStatus
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.date_parser import parse_date


@click.group()
def client_group():
    """Manage clients (students and patients)."""
    pass


@client_group.command("add")
@click.argument("name")
@click.option("--staff", "staff_handle", required=True, help="Handle of the responsible staff member")
@click.option("--service", required=True, help="Service label (e.g. 'Tutoring - Math')")
@click.option("--fee", default="0", help="Monthly fee (0 when not billed monthly)")
@click.option("--birth-date", help="Birth date (YYYY-MM-DD)")
@click.option("--guardian", help="Guardian name")
@click.option("--guardian-contact", help="Guardian phone or email")
@click.option("--notes", help="Notes")
@click.pass_context
def add_client(
    ctx,
    name: str,
    staff_handle: str,
    service: str,
    fee: str,
    birth_date: str | None,
    guardian: str | None,
    guardian_contact: str | None,
    notes: str | None,
) -> None:
    """Register a new client (administrators only).

    Examples:
        tutordesk client add "Ana Lima" --staff bruno.costa --service "Tutoring - Math" --fee 450
    """
    session = require_session(ctx)
    service_obj = ClientService(ctx.obj["store"])

    try:
        client = service_obj.create_client(
            session,
            name=name,
            staff_handle=staff_handle,
            service=service,
            monthly_fee=parse_amount(fee),
            birth_date=parse_date(birth_date) if birth_date else None,
            guardian_name=guardian,
            guardian_contact=guardian_contact,
            notes=notes,
        )
        click.echo(f"Created client '{client.name}' (ID: {client.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@client_group.command("update")
@click.argument("client_id")
@click.option("--name", help="Client name")
@click.option("--staff", "staff_handle", help="Handle of the responsible staff member")
@click.option("--service", help="Service label")
@click.option("--fee", help="Monthly fee")
@click.option("--status", type=click.Choice([s.value for s in RecordStatus]), help="Active or inactive")
@click.option("--guardian", help="Guardian name")
@click.option("--guardian-contact", help="Guardian phone or email")
@click.option("--notes", help="Notes")
@click.pass_context
def update_client(
    ctx,
    client_id: str,
    name: str | None,
    staff_handle: str | None,
    service: str | None,
    fee: str | None,
    status: str | None,
    guardian: str | None,
    guardian_contact: str | None,
    notes: str | None,
) -> None:
    """Update a client (administrators only).

    Updates only the fields that are provided.
    """
    session = require_session(ctx)
    service_obj = ClientService(ctx.obj["store"])

    client = service_obj.get_client(client_id)
    if client is None:
        click.echo(f"Error: Client {client_id} not found", err=True)
        ctx.exit(1)

    changes = {
        "name": name,
        "staff_handle": staff_handle,
        "service": service,
        "status": RecordStatus(status) if status else None,
        "guardian_name": guardian,
        "guardian_contact": guardian_contact,
        "notes": notes,
    }
    try:
        if fee is not None:
            changes["monthly_fee"] = parse_amount(fee)
        client = replace(client, **{k: v for k, v in changes.items() if v is not None})
        service_obj.save_client(session, client)
        click.echo(f"Updated client '{client.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@client_group.command("list")
@click.option("--search", help="Match on client or staff name")
@click.pass_context
def list_clients(ctx, search: str | None) -> None:
    """List clients you can see."""
    session = require_session(ctx)
    service = ClientService(ctx.obj["store"])

    clients = service.list_clients(session, search=search)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 90)
    for c in clients:
        click.echo(
            f"{c.id[:8]} | {c.name:24s} | {c.service:22s} | {c.staff_handle:14s} | "
            f"{c.status.value:8s} | {c.monthly_fee:>9.2f}"
        )
    click.echo("-" * 90)
    click.echo(f"Active clients: {sum(1 for c in clients if c.status == RecordStatus.ACTIVE)}")


@client_group.command("show")
@click.argument("client_id")
@click.pass_context
def show_client(ctx, client_id: str) -> None:
    """Show a client with their progress log."""
    session = require_session(ctx)
    service = ClientService(ctx.obj["store"])

    client = next((c for c in service.list_clients(session) if c.id == client_id), None)
    if client is None:
        click.echo(f"Error: Client {client_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Name:     {client.name}")
    click.echo(f"Service:  {client.service}")
    click.echo(f"Staff:    {client.staff_handle}")
    click.echo(f"Status:   {client.status.value}")
    click.echo(f"Fee:      {client.monthly_fee:.2f}")
    if client.guardian_name:
        click.echo(f"Guardian: {client.guardian_name} ({client.guardian_contact or '-'})")
    if client.notes:
        click.echo(f"Notes:    {client.notes}")

    click.echo("\nProgress log:")
    if not client.progress_log:
        click.echo("  (empty)")
    for entry in client.progress_log:
        click.echo(f"  {entry.timestamp:%Y-%m-%d %H:%M} {entry.author}: {entry.text}")


@client_group.command("note")
@click.argument("client_id")
@click.argument("text")
@click.pass_context
def add_note(ctx, client_id: str, text: str) -> None:
    """Append a note to a client's progress log."""
    session = require_session(ctx)
    service = ClientService(ctx.obj["store"])

    try:
        result = service.add_progress_entry(session, client_id, text)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Added progress note")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
