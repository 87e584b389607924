"""Main CLI entry point."""

import logging

import click

from paytrack import __version__

# Import and register all commands at module level
from paytrack.cli.commands import (
    backup,
    category,
    clear,
    export,
    import_cmd,
    payment,
    summary,
    user,
)


@click.group()
@click.version_option(version=__version__, prog_name="paytrack")
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYTRACK_DB_PATH environment variable)",
    envvar="PAYTRACK_DB_PATH",
)
@click.option(
    "--user",
    "username",
    envvar="PAYTRACK_USER",
    help="Login name (or PAYTRACK_USER); prompted when missing",
)
@click.option(
    "--password",
    envvar="PAYTRACK_PASSWORD",
    help="Login password (or PAYTRACK_PASSWORD); prompted when missing",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, username: str | None, password: str | None, verbose: bool):
    """Paytrack - Check payment tracking application.

    Track post-dated check payments across banks, companies and business
    groups. Import them from spreadsheets, mark them as paid and export
    reports.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)

    # Login happens in cli.session once a command needs the store
    ctx.obj["db_path"] = db_path
    ctx.obj["username"] = username
    ctx.obj["password"] = password


# Register all commands
payment.register_commands(cli)
summary.register_commands(cli)
import_cmd.register_commands(cli)
backup.register_commands(cli)
export.register_commands(cli)
clear.register_commands(cli)
category.register_commands(cli)
user.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
