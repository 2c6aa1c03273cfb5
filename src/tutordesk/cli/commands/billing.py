"""Billing commands."""

import click
from tutordesk.domain.billing import BillingService
from tutordesk.domain.entities import BillingStatus
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.period import current_period, normalize_period_filter


def _print_entries(entries) -> None:
    click.echo("-" * 80)
    for e in entries:
        click.echo(
            f"{e.id[:8]} | {e.period} | {e.client_id[:8]} | {e.description:24s} | "
            f"{e.amount:>10.2f} | {e.status.value}"
        )


@click.group()
def billing_group():
    """Generate and track client billing (administrators only)."""
    pass


@billing_group.command("generate")
@click.argument("period", required=False)
@click.pass_context
def generate(ctx, period: str | None) -> None:
    """Create the monthly fee entries for a period.

    PERIOD is YYYY-MM, 'this month' or 'last month' (default: this month).
    Clients that already have an entry for the period are skipped, so
    running this twice is safe.

    Examples:
        tutordesk billing generate 2024-05
    """
    session = require_session(ctx)
    service = BillingService(ctx.obj["store"])

    try:
        outcome = service.generate_for_period(session, period or current_period())
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)

    if outcome.nothing_to_generate:
        click.echo(f"No active clients with a monthly fee for {outcome.period}.")
        return
    click.echo(f"Created {outcome.created_count} billing entries for {outcome.period}.")
    if outcome.skipped_existing:
        click.echo(f"Skipped {outcome.skipped_existing} clients already billed for {outcome.period}.")


@billing_group.command("add")
@click.argument("client_id")
@click.argument("amount")
@click.option("--period", help="Period YYYY-MM (default: this month)")
@click.option("--description", help="Description (default: 'Monthly fee YYYY-MM')")
@click.option(
    "--status",
    type=click.Choice([s.value for s in BillingStatus]),
    default=BillingStatus.PENDING.value,
    show_default=True,
)
@click.pass_context
def add_entry(
    ctx, client_id: str, amount: str, period: str | None, description: str | None, status: str
) -> None:
    """Record a billing entry by hand."""
    session = require_session(ctx)
    service = BillingService(ctx.obj["store"])

    try:
        entry_id = service.add_entry(
            session,
            client_id,
            parse_amount(amount),
            period or current_period(),
            description=description,
            status=BillingStatus(status),
        )
        click.echo(f"Created billing entry (ID: {entry_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@billing_group.command("status")
@click.argument("entry_id")
@click.argument("status", type=click.Choice([s.value for s in BillingStatus]))
@click.pass_context
def set_status(ctx, entry_id: str, status: str) -> None:
    """Mark a billing entry paid, pending or overdue."""
    session = require_session(ctx)
    service = BillingService(ctx.obj["store"])

    try:
        result = service.update_entry_status(session, entry_id, BillingStatus(status))
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, f"Marked billing entry as {status}")


@billing_group.command("list")
@click.option("--period", help="Period YYYY-MM or a year")
@click.option("--status", type=click.Choice([s.value for s in BillingStatus]), help="Only this status")
@click.pass_context
def list_entries(ctx, period: str | None, status: str | None) -> None:
    """List billing entries."""
    session = require_session(ctx)
    service = BillingService(ctx.obj["store"])

    try:
        entries = service.list_entries(
            session,
            period=normalize_period_filter(period) if period else None,
            status=BillingStatus(status) if status else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)

    if not entries:
        click.echo("No billing entries found.")
        return
    click.echo("\nBilling entries:")
    _print_entries(entries)


@billing_group.command("outstanding")
@click.pass_context
def outstanding(ctx) -> None:
    """List pending and overdue entries, oldest first."""
    session = require_session(ctx)
    service = BillingService(ctx.obj["store"])

    try:
        entries = service.outstanding_entries(session)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)

    if not entries:
        click.echo("No outstanding payments.")
        return
    click.echo("\nOutstanding payments:")
    _print_entries(entries)


def register_commands(cli):
    """Register billing commands with main CLI."""
    cli.add_command(billing_group, name="billing")
