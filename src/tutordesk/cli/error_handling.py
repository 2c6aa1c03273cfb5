"""CLI error handling helpers."""

import click

from tutordesk.domain.entities import NotFound, UpdateResult
from tutordesk.domain.errors import DomainError, StoreError, batch_commit_failed, document_not_found


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_store_error(ctx: click.Context, error: StoreError) -> None:
    """Render a store failure with a generic retry message and exit."""
    click.echo(f"Error: {batch_commit_failed()}", err=True)
    ctx.exit(1)


def report_update(ctx: click.Context, result: UpdateResult, message: str) -> None:
    """Print message for an Updated result, or fail for NotFound."""
    if isinstance(result, NotFound):
        click.echo(f"Error: {document_not_found(result.collection.value, result.doc_id)}", err=True)
        ctx.exit(1)
    click.echo(message)
