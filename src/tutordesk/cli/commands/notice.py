"""Notice board commands."""

import click
from tutordesk.domain.notices import NoticeService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error, report_update
from tutordesk.cli.session import require_session


def _reactions(reactions) -> str:
    counts: dict[str, int] = {}
    for r in reactions:
        counts[r.emoji] = counts.get(r.emoji, 0) + 1
    return " ".join(f"{emoji}{count}" for emoji, count in counts.items())


@click.group()
def notice_group():
    """Post and read notices."""
    pass


@notice_group.command("post")
@click.argument("content")
@click.option("--to", "recipients", multiple=True, help="Recipient handle (repeatable; default: everyone)")
@click.pass_context
def post_notice(ctx, content: str, recipients: tuple[str, ...]) -> None:
    """Post a notice to everyone or to selected staff.

    Examples:
        tutordesk notice post "Team meeting on Friday"
        tutordesk notice post "Please update your timesheet" --to bruno.costa
    """
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        notice_id = service.post_notice(session, content, recipients=list(recipients) or None)
        click.echo(f"Posted notice (ID: {notice_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


@notice_group.command("list")
@click.pass_context
def list_notices(ctx) -> None:
    """List notices addressed to you, newest first."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    notices = service.list_notices(session)
    if not notices:
        click.echo("No notices.")
        return

    for n in notices:
        to = "everyone" if n.recipients is None else ", ".join(n.recipients)
        click.echo(f"\n[{n.id[:8]}] {n.posted_at:%Y-%m-%d %H:%M} {n.author} -> {to}")
        click.echo(f"  {n.content}")
        if n.reactions:
            click.echo(f"  {_reactions(n.reactions)}")
        for c in n.comments:
            line = f"    {c.author}: {c.content}"
            if c.reactions:
                line += f"  {_reactions(c.reactions)}"
            click.echo(line)


@notice_group.command("react")
@click.argument("notice_id")
@click.argument("emoji")
@click.pass_context
def react(ctx, notice_id: str, emoji: str) -> None:
    """Add your reaction to a notice, or remove it if already there."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        result = service.toggle_reaction(session, notice_id, emoji)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Toggled reaction")


@notice_group.command("comment")
@click.argument("notice_id")
@click.argument("content")
@click.pass_context
def comment(ctx, notice_id: str, content: str) -> None:
    """Comment on a notice."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        result = service.add_comment(session, notice_id, content)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Added comment")


@notice_group.command("react-comment")
@click.argument("notice_id")
@click.argument("comment_id")
@click.argument("emoji")
@click.pass_context
def react_comment(ctx, notice_id: str, comment_id: str, emoji: str) -> None:
    """Toggle your reaction on a comment."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        result = service.toggle_comment_reaction(session, notice_id, comment_id, emoji)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Toggled reaction")


@notice_group.command("edit")
@click.argument("notice_id")
@click.argument("content")
@click.pass_context
def edit_notice(ctx, notice_id: str, content: str) -> None:
    """Change the text of your notice."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        result = service.update_notice(session, notice_id, content)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Updated notice")


@notice_group.command("delete")
@click.argument("notice_id")
@click.pass_context
def delete_notice(ctx, notice_id: str) -> None:
    """Delete your notice."""
    session = require_session(ctx)
    service = NoticeService(ctx.obj["store"])

    try:
        result = service.delete_notice(session, notice_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)
    report_update(ctx, result, "Deleted notice")


def register_commands(cli):
    """Register notice commands with main CLI."""
    cli.add_command(notice_group, name="notice")
