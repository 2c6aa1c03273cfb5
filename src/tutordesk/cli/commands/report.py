"""Report commands."""

import click
from tutordesk.domain.reports import ReportService
from tutordesk.cli.error_handling import handle_domain_error
from tutordesk.cli.session import require_session
from tutordesk.utils.period import current_period, normalize_period_filter


@click.group()
def report_group():
    """Revenue, team and client reports."""
    pass


@report_group.command("financial")
@click.option("--period", help="Period YYYY-MM or a year (default: all time)")
@click.pass_context
def financial(ctx, period: str | None) -> None:
    """Revenue per service and total expense (administrators only)."""
    session = require_session(ctx)
    service = ReportService(ctx.obj["store"])

    try:
        period = normalize_period_filter(period) if period else None
        report = service.financial_report(session, period=period)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nRevenue by service ({period or 'all time'})")
    click.echo("-" * 50)
    if not report.revenue_by_service:
        click.echo("No paid revenue.")
    for label, amount in sorted(report.revenue_by_service.items(), key=lambda item: -item[1]):
        click.echo(f"{label:<34} {amount:>15,.2f}")
    click.echo("-" * 50)
    click.echo(f"{'Total expense':<34} {report.total_expense:>15,.2f}")


@report_group.command("team")
@click.argument("period", required=False)
@click.pass_context
def team(ctx, period: str | None) -> None:
    """Completed sessions and estimated earnings per staff member."""
    session = require_session(ctx)
    service = ReportService(ctx.obj["store"])
    try:
        period = normalize_period_filter(period) if period else current_period()
        rows = service.team_performance(session, period)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTeam performance ({period})")
    click.echo("-" * 60)
    for row in rows:
        click.echo(f"{row.name:26s} | {row.completed_sessions:4d} sessions | {row.estimated_earnings:>12,.2f}")


@report_group.command("clients")
@click.pass_context
def clients(ctx) -> None:
    """Client counts per status and per service."""
    session = require_session(ctx)
    service = ReportService(ctx.obj["store"])

    try:
        analytics = service.client_analytics(session)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nClients by status:")
    for status, count in sorted(analytics.status_counts.items()):
        click.echo(f"  {status:<30} {count:5d}")
    click.echo("\nClients by service:")
    for label, count in sorted(analytics.service_counts.items()):
        click.echo(f"  {label:<30} {count:5d}")


@report_group.command("timesheet")
@click.argument("handle", required=False)
@click.option("--period", help="Period YYYY-MM (default: this month)")
@click.pass_context
def timesheet(ctx, handle: str | None, period: str | None) -> None:
    """Completed sessions and earnings of one staff member (yourself by default)."""
    session = require_session(ctx)
    service = ReportService(ctx.obj["store"])

    try:
        period = normalize_period_filter(period) if period else current_period()
        sheet = service.timesheet(session, handle or session.handle, period)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTimesheet for {sheet.handle} ({sheet.period})")
    click.echo("-" * 70)
    for line in sheet.lines:
        click.echo(f"{line.date.isoformat()} | {line.client_name:22s} | {line.service:20s} | {line.earning:>9,.2f}")
    click.echo("-" * 70)
    click.echo(f"{sheet.completed_sessions} sessions, total {sheet.total_earnings:,.2f}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
