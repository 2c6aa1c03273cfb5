"""Main CLI entry point."""

import click
from tutordesk.database.factories import create_identity_provider, create_sqlite_store
from tutordesk.domain.session import SessionManager
from tutordesk.logging_config import LOG_LEVEL_ENV, configure_logging

# Import and register all commands at module level
from tutordesk.cli.commands import (
    billing,
    client,
    event,
    init_admin,
    ledger,
    notice,
    report,
    staff,
    summary,
    task,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TUTORDESK_DB_PATH environment variable)",
    envvar="TUTORDESK_DB_PATH",
)
@click.option("--email", help="Sign-in email", envvar="TUTORDESK_EMAIL")
@click.option("--password", help="Sign-in password", envvar="TUTORDESK_PASSWORD")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides TUTORDESK_LOG_LEVEL environment variable)",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, email: str | None, password: str | None, log_level: str | None):
    """Tutordesk - practice management for tutoring and therapy.

    Keep staff, clients and their sessions, monthly billing, income and
    expenses, notices and tasks in one place. Most commands need a signed-in
    staff member: pass --email and --password or set TUTORDESK_EMAIL and
    TUTORDESK_PASSWORD.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the store only when actually running a command (not for help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        identity_provider = create_identity_provider(store)
        sessions = SessionManager(store, identity_provider)
        ctx.obj.update(
            store=store,
            identity_provider=identity_provider,
            sessions=sessions,
            email=email,
            password=password,
        )
        ctx.call_on_close(sessions.close)
        ctx.call_on_close(store.disconnect)


# Register all commands
init_admin.register_commands(cli)
staff.register_commands(cli)
client.register_commands(cli)
event.register_commands(cli)
billing.register_commands(cli)
ledger.register_commands(cli)
summary.register_commands(cli)
report.register_commands(cli)
notice.register_commands(cli)
task.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
