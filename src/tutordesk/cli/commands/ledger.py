"""Misc income and general expense commands."""

import click
from tutordesk.domain.entities import ExpenseStatus
from tutordesk.domain.ledger import LedgerService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session
from tutordesk.utils.amount_parser import parse_amount
from tutordesk.utils.period import current_period, normalize_period_filter


@click.group()
def income_group():
    """Manage income outside monthly billing (administrators only)."""
    pass


@income_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--period", help="Period YYYY-MM (default: this month)")
@click.pass_context
def add_income(ctx, description: str, amount: str, period: str | None) -> None:
    """Record misc income.

    Examples:
        tutordesk income add "Workshop" 300 --period 2024-05
    """
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        income_id = service.add_income(session, description, parse_amount(amount), period or current_period())
        click.echo(f"Recorded income '{description}' (ID: {income_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@income_group.command("update")
@click.argument("income_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.pass_context
def update_income(ctx, income_id: str, description: str | None, amount: str | None) -> None:
    """Update misc income."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        result = service.update_income(
            session,
            income_id,
            description=description,
            amount=parse_amount(amount) if amount is not None else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Updated income")


@income_group.command("delete")
@click.argument("income_id")
@click.pass_context
def delete_income(ctx, income_id: str) -> None:
    """Delete misc income."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        result = service.delete_income(session, income_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Deleted income")


@income_group.command("list")
@click.option("--period", help="Period YYYY-MM or a year")
@click.pass_context
def list_incomes(ctx, period: str | None) -> None:
    """List misc income."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        incomes = service.list_incomes(session, period=normalize_period_filter(period) if period else None)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)

    if not incomes:
        click.echo("No income found.")
        return
    click.echo("\nIncome:")
    click.echo("-" * 60)
    for i in incomes:
        click.echo(f"{i.id[:8]} | {i.period} | {i.description:28s} | {i.amount:>10.2f}")


@click.group()
def expense_group():
    """Manage general expenses (administrators only)."""
    pass


@expense_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--period", help="Period YYYY-MM (default: this month)")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ExpenseStatus]),
    default=ExpenseStatus.PENDING.value,
    show_default=True,
)
@click.pass_context
def add_expense(ctx, description: str, amount: str, period: str | None, status: str) -> None:
    """Record a general expense.

    Examples:
        tutordesk expense add "Rent" 330 --period 2024-05 --status paid
    """
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        expense_id = service.add_expense(
            session, description, parse_amount(amount), period or current_period(), ExpenseStatus(status)
        )
        click.echo(f"Recorded expense '{description}' (ID: {expense_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@expense_group.command("update")
@click.argument("expense_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--status", type=click.Choice([s.value for s in ExpenseStatus]), help="New status")
@click.pass_context
def update_expense(
    ctx, expense_id: str, description: str | None, amount: str | None, status: str | None
) -> None:
    """Update a general expense."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        result = service.update_expense(
            session,
            expense_id,
            description=description,
            amount=parse_amount(amount) if amount is not None else None,
            status=ExpenseStatus(status) if status else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Updated expense")


@expense_group.command("delete")
@click.argument("expense_id")
@click.pass_context
def delete_expense(ctx, expense_id: str) -> None:
    """Delete a general expense."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        result = service.delete_expense(session, expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Deleted expense")


@expense_group.command("list")
@click.option("--period", help="Period YYYY-MM or a year")
@click.pass_context
def list_expenses(ctx, period: str | None) -> None:
    """List general expenses."""
    session = require_session(ctx)
    service = LedgerService(ctx.obj["store"])

    try:
        expenses = service.list_expenses(session, period=normalize_period_filter(period) if period else None)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)

    if not expenses:
        click.echo("No expenses found.")
        return
    click.echo("\nExpenses:")
    click.echo("-" * 70)
    for e in expenses:
        click.echo(f"{e.id[:8]} | {e.period} | {e.description:28s} | {e.amount:>10.2f} | {e.status.value}")


def register_commands(cli):
    """Register income and expense commands with main CLI."""
    cli.add_command(income_group, name="income")
    cli.add_command(expense_group, name="expense")
