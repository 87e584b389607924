"""Spreadsheet import command."""

import click
from paytrack.cli.error_handling import handle_error
from paytrack.cli.session import payment_service, save_state
from paytrack.domain.errors import PermissionDenied
from paytrack.domain.tabular_import import TabularImportService
from paytrack.utils.amount_parser import format_lira
from paytrack.utils.date_parser import parse_date


def _format_rows(rows: tuple[int, ...]) -> str:
    return ", ".join(str(r) for r in rows)


@click.command("import")
@click.argument("spreadsheet", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mark-paid/--keep-pending",
    "mark_paid",
    default=None,
    help="Mark past-due payments as paid without asking (or keep them pending)",
)
@click.option("--as-of", help="Reference date for past-due payments (default: today)")
@click.pass_context
def import_spreadsheet(ctx, spreadsheet: str, mark_paid: bool | None, as_of: str | None):
    """Import payments from an .xlsx or .csv spreadsheet.

    The first row must hold the columns Due Date, Check Number, Bank,
    Company, Business Group, Description and Amount, in this order (the
    Turkish headers are accepted too). When some payments are already past
    due you are asked whether to mark them as paid.

    Examples:
        paytrack import cekler.xlsx
        paytrack import cekler.csv --mark-paid
    """
    today = None
    if as_of:
        try:
            today = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    service = TabularImportService(payment_service(ctx))
    try:
        result = service.preview_file(spreadsheet, today=today)
    except (ValueError, FileNotFoundError) as e:
        handle_error(ctx, e)

    if result.rejected_rows:
        click.echo(
            f"Warning: Skipped {len(result.rejected_rows)} invalid row(s): "
            f"{_format_rows(result.rejected_rows)}",
            err=True,
        )
    if result.defaulted_date_rows:
        click.echo(
            f"Warning: Unreadable due date, using today for row(s): "
            f"{_format_rows(result.defaulted_date_rows)}",
            err=True,
        )

    if result.has_past_due and mark_paid is None:
        click.echo(
            f"{len(result.past_due_indices)} payment(s) are past due "
            f"(total {format_lira(result.past_due_total)})."
        )
        mark_paid = click.confirm("Mark them as paid?", default=False)

    try:
        payments = service.commit(result, auto_mark_paid=bool(mark_paid))
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    paid = sum(1 for p in payments if p.is_paid)
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {len(payments)} payments ({format_lira(result.total_amount)})")
    if paid:
        click.echo(f"  Marked as paid: {paid}")
    if result.rejected_rows:
        click.echo(f"  Skipped: {len(result.rejected_rows)} invalid rows")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_spreadsheet)
