"""First-administrator setup command."""

import click
from tutordesk.domain.staff import StaffService
from tutordesk.domain.errors import StoreError
from tutordesk.cli.error_handling import handle_domain_error, handle_store_error


@click.command("init-admin")
@click.argument("handle")
@click.argument("name")
@click.argument("email")
@click.option(
    "--password",
    "admin_password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the new administrator",
)
@click.pass_context
def init_admin(ctx, handle: str, name: str, email: str, admin_password: str) -> None:
    """Create the first administrator of an empty installation.

    Only works while no staff member exists; afterwards administrators add
    staff with 'staff create'.

    Examples:
        tutordesk init-admin gabriella "Gabriella Souza" gabriella@example.com
    """
    service = StaffService(ctx.obj["store"], ctx.obj["identity_provider"])

    try:
        staff = service.bootstrap_admin(handle=handle, name=name, email=email, password=admin_password)
        click.echo(f"Created administrator '{staff.handle}' ({staff.email})")
    except ValueError as e:
        handle_domain_error(ctx, e)
    except StoreError as e:
        handle_store_error(ctx, e)


def register_commands(cli):
    """Register init-admin command with main CLI."""
    cli.add_command(init_admin)
