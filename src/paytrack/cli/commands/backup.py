"""Backup and restore commands."""

import click
from paytrack.cli.error_handling import handle_error
from paytrack.cli.session import current_state, payment_service, save_state
from paytrack.domain.backup import BackupService
from paytrack.domain.errors import InvalidRecord, PermissionDenied


@click.command("backup")
@click.argument("destination", type=click.Path(), default=".")
@click.pass_context
def backup(ctx, destination: str):
    """Write every payment to a JSON backup file.

    DESTINATION is a file or a directory; in a directory the file is named
    odeme_takip_yedek_<date>.json. A path ending in "/" is created as a
    directory when missing.

    Examples:
        paytrack backup
        paytrack backup ~/yedekler/
        paytrack backup cekler.json
    """
    service = BackupService(payment_service(ctx))
    try:
        path = service.write_backup(destination)
    except OSError as e:
        click.echo(f"Error: Could not write backup: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Backed up {len(current_state(ctx).payments)} payments to {path}")


@click.command("restore")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def restore(ctx, backup_file: str, yes: bool):
    """Replace all payments with the content of a backup file.

    The backup is validated first; nothing changes if any record is invalid.

    Examples:
        paytrack restore odeme_takip_yedek_2024-01-31.json
    """
    service = BackupService(payment_service(ctx))
    try:
        payments = service.load_backup(backup_file)
    except InvalidRecord as e:
        click.echo("Error: Backup contains invalid records:", err=True)
        for problem in e.problems:
            click.echo(f"  {problem}", err=True)
        ctx.exit(1)
    except (ValueError, FileNotFoundError) as e:
        handle_error(ctx, e)

    current = len(current_state(ctx).payments)
    if not yes and not click.confirm(
        f"Replace {current} current payments with {len(payments)} from the backup?"
    ):
        click.echo("Restore cancelled.")
        return

    try:
        count = service.payment_service.restore_payments(payments)
    except PermissionDenied as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Restored {count} payments from {backup_file}")


def register_commands(cli):
    """Register backup commands with CLI."""
    cli.add_command(backup)
    cli.add_command(restore)
