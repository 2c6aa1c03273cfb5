"""Financial summary command."""

import click
from tutordesk.domain.billing import BillingService
from tutordesk.domain.ledger import LedgerService
from tutordesk.domain.summary import summarize
from tutordesk.cli.error_handling import handle_domain_error
from tutordesk.cli.session import require_session
from tutordesk.utils.period import current_period, normalize_period_filter


@click.command("summary")
@click.argument("period", required=False)
@click.pass_context
def summary(ctx, period: str | None) -> None:
    """Show income, expense and balance for a period.

    PERIOD is YYYY-MM or a year such as 2024 (default: this month). Income
    counts paid billing entries and misc income; expense counts every
    general expense of the period.

    Examples:
        tutordesk summary 2024-05
        tutordesk summary 2024
    """
    session = require_session(ctx)
    store = ctx.obj["store"]
    try:
        period = normalize_period_filter(period) if period else current_period()
        result = summarize(
            BillingService(store).list_entries(session),
            LedgerService(store).list_incomes(session),
            LedgerService(store).list_expenses(session),
            period,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSummary for {result.period}")
    click.echo("-" * 40)
    click.echo(f"{'Income':<20} {result.total_income:>19,.2f}")
    click.echo(f"{'Expense':<20} {result.total_expense:>19,.2f}")
    click.echo(f"{'Balance':<20} {result.balance:>19,.2f}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
