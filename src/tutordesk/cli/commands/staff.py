"""Staff management commands."""

import click
from tutordesk.domain.entities import RecordStatus, Role, ServiceRate
from tutordesk.domain.staff import StaffService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.date_parser import parse_date


def parse_rates(values: tuple[str, ...]) -> list[ServiceRate]:
    """Parse "service=rate" pairs into service rates."""
    rates = []
    for value in values:
        service_type, sep, amount = value.partition("=")
        if not sep or not service_type.strip():
            raise ValueError(f"Invalid rate '{value}' (expected SERVICE=RATE)")
        rates.append(ServiceRate(service_type=service_type.strip(), hourly_rate=parse_amount(amount)))
    return rates


def _format_rates(rates: tuple[ServiceRate, ...]) -> str:
    if not rates:
        return "-"
    return ", ".join(f"{r.service_type} {r.hourly_rate:.2f}" for r in rates)


@click.group()
def staff_group():
    """Manage staff members."""
    pass


@staff_group.command("create")
@click.argument("handle")
@click.argument("name")
@click.argument("email")
@click.option("--staff-password", prompt=True, hide_input=True, help="Password for the new account")
@click.option("--rate", "rates", multiple=True, help="Hourly rate as SERVICE=RATE (repeatable)")
@click.option("--phone", help="Phone number")
@click.option("--address", help="Address")
@click.option("--birth-date", help="Birth date (YYYY-MM-DD)")
@click.pass_context
def create_staff(
    ctx,
    handle: str,
    name: str,
    email: str,
    staff_password: str,
    rates: tuple[str, ...],
    phone: str | None,
    address: str | None,
    birth_date: str | None,
) -> None:
    """Register a staff member with a sign-in account (administrators only).

    Examples:
        tutordesk staff create bruno.costa "Bruno Costa" bruno@example.com --rate remedial=60
    """
    session = require_session(ctx)
    service = StaffService(ctx.obj["store"], ctx.obj["identity_provider"])

    try:
        staff = service.create_staff(
            session,
            handle=handle,
            name=name,
            email=email,
            password=staff_password,
            service_rates=parse_rates(rates),
            birth_date=parse_date(birth_date) if birth_date else None,
            phone=phone,
            address=address,
        )
        click.echo(f"Created staff member '{staff.handle}' (ID: {staff.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@staff_group.command("list")
@click.option("--active", is_flag=True, help="Only active staff")
@click.pass_context
def list_staff(ctx, active: bool) -> None:
    """List staff members."""
    session = require_session(ctx)
    service = StaffService(ctx.obj["store"], ctx.obj["identity_provider"])

    members = service.list_staff(session, active_only=active)
    if not members:
        click.echo("No staff found.")
        return

    click.echo("\nStaff:")
    click.echo("-" * 80)
    for s in members:
        click.echo(
            f"{s.handle:16s} | {s.name:24s} | {s.role.value:7s} | {s.status.value:8s} | "
            f"{_format_rates(s.service_rates)}"
        )


@staff_group.command("show")
@click.argument("handle", required=False)
@click.pass_context
def show_staff(ctx, handle: str | None) -> None:
    """Show a staff profile (your own when HANDLE is omitted)."""
    session = require_session(ctx)
    service = StaffService(ctx.obj["store"], ctx.obj["identity_provider"])

    staff = service.get_by_handle(handle) if handle else session.staff
    if staff is None or (not session.is_admin and staff.id != session.staff.id):
        click.echo(f"Error: Staff member '{handle}' not found", err=True)
        ctx.exit(1)

    click.echo(f"Handle:     {staff.handle}")
    click.echo(f"Name:       {staff.name}")
    click.echo(f"Email:      {staff.email}")
    click.echo(f"Role:       {staff.role.value}")
    click.echo(f"Status:     {staff.status.value}")
    click.echo(f"Rates:      {_format_rates(staff.service_rates)}")
    if staff.phone:
        click.echo(f"Phone:      {staff.phone}")
    if staff.address:
        click.echo(f"Address:    {staff.address}")
    if staff.birth_date:
        click.echo(f"Birth date: {staff.birth_date.isoformat()}")


@staff_group.command("update")
@click.argument("handle")
@click.option("--name", help="Display name")
@click.option("--phone", help="Phone number")
@click.option("--address", help="Address")
@click.option("--birth-date", help="Birth date (YYYY-MM-DD)")
@click.option("--rate", "rates", multiple=True, help="Replace hourly rates with SERVICE=RATE (repeatable)")
@click.option("--status", type=click.Choice([s.value for s in RecordStatus]), help="Active or inactive")
@click.option("--role", type=click.Choice([r.value for r in Role]), help="Administrator or regular staff")
@click.pass_context
def update_staff(
    ctx,
    handle: str,
    name: str | None,
    phone: str | None,
    address: str | None,
    birth_date: str | None,
    rates: tuple[str, ...],
    status: str | None,
    role: str | None,
) -> None:
    """Update a staff profile.

    Staff may update their own profile; role and status changes are for
    administrators.

    Examples:
        tutordesk staff update bruno.costa --phone "+55 11 99999-0000"
        tutordesk staff update bruno.costa --status inactive
    """
    session = require_session(ctx)
    service = StaffService(ctx.obj["store"], ctx.obj["identity_provider"])

    staff = service.get_by_handle(handle)
    if staff is None:
        click.echo(f"Error: Staff member '{handle}' not found", err=True)
        ctx.exit(1)

    try:
        result = service.update_profile(
            session,
            staff.id,
            name=name,
            phone=phone,
            address=address,
            birth_date=parse_date(birth_date) if birth_date else None,
            service_rates=parse_rates(rates) if rates else None,
            status=RecordStatus(status) if status else None,
            role=Role(role) if role else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, f"Updated staff member '{staff.handle}'")


def register_commands(cli):
    """Register staff commands with main CLI."""
    cli.add_command(staff_group, name="staff")
