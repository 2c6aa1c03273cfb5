"""CLI sign-in helper."""

import click

from tutordesk.cli.error_handling import handle_domain_error
from tutordesk.domain.errors import AuthError
from tutordesk.domain.session import Session


def require_session(ctx: click.Context) -> Session:
    """Sign in with the global credentials, once per invocation.

    Exits with an error when no credentials were given or sign-in fails.
    """
    sessions = ctx.obj["sessions"]
    if sessions.current is not None:
        return sessions.current

    email = ctx.obj.get("email")
    password = ctx.obj.get("password")
    if not email or not password:
        click.echo(
            "Error: Sign in with --email and --password "
            "(or TUTORDESK_EMAIL and TUTORDESK_PASSWORD).",
            err=True,
        )
        ctx.exit(1)

    try:
        return sessions.sign_in(email, password)
    except AuthError as e:
        handle_domain_error(ctx, e)
