"""Command for removing every payment."""

import click
from paytrack.cli.error_handling import handle_error
from paytrack.cli.session import payment_service, save_state


@click.command("clear")
@click.option(
    "--confirm-password",
    prompt="Password",
    hide_input=True,
    help="Your password, required to delete all payments",
)
@click.pass_context
def clear_payments(ctx, confirm_password: str):
    """Delete ALL payments.

    This cannot be undone. Take a backup first with 'paytrack backup'.
    """
    try:
        removed = payment_service(ctx).clear_payments(confirm_password)
    except ValueError as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Deleted {removed} payments")


def register_commands(cli):
    """Register clear command with CLI."""
    cli.add_command(clear_payments)
