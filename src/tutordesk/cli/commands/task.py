"""Task board commands."""

import click
from tutordesk.domain.entities import TaskStatus
from tutordesk.domain.tasks import TaskService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session


@click.group()
def task_group():
    """Manage tasks."""
    pass


@task_group.command("add")
@click.argument("title")
@click.option("--description", default="", help="Task description")
@click.option("--assignee", "assignees", multiple=True, required=True, help="Assignee handle (repeatable)")
@click.pass_context
def add_task(ctx, title: str, description: str, assignees: tuple[str, ...]) -> None:
    """Create a task (administrators only).

    Examples:
        tutordesk task add "Order new workbooks" --assignee bruno.costa
    """
    session = require_session(ctx)
    service = TaskService(ctx.obj["store"])

    try:
        task_id = service.add_task(session, title, description, assignees)
        click.echo(f"Created task '{title}' (ID: {task_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@task_group.command("status")
@click.argument("task_id")
@click.argument("status", type=click.Choice([s.value for s in TaskStatus]))
@click.pass_context
def set_status(ctx, task_id: str, status: str) -> None:
    """Move a task to todo, in-progress or done."""
    session = require_session(ctx)
    service = TaskService(ctx.obj["store"])

    try:
        result = service.update_status(session, task_id, TaskStatus(status))
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, f"Moved task to {status}")


@task_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in TaskStatus]), help="Only this column")
@click.pass_context
def list_tasks(ctx, status: str | None) -> None:
    """List tasks assigned to you (all tasks for administrators)."""
    session = require_session(ctx)
    service = TaskService(ctx.obj["store"])

    tasks = service.list_tasks(session, status=TaskStatus(status) if status else None)
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo("\nTasks:")
    click.echo("-" * 80)
    for t in tasks:
        click.echo(f"{t.id[:8]} | {t.status.value:11s} | {t.title:30s} | {', '.join(t.assignees)}")


def register_commands(cli):
    """Register task commands with main CLI."""
    cli.add_command(task_group, name="task")
