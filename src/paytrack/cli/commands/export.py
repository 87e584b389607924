"""Report export commands."""

import click
from paytrack.cli.error_handling import handle_error
from paytrack.cli.filters import filter_options, pop_criteria
from paytrack.cli.session import summary_service
from paytrack.export import export_excel, export_image, export_pdf


@click.group("export")
def export_group():
    """Export the filtered payment list as a report."""
    pass


def _run_export(ctx, exporter, output: str | None, kwargs: dict) -> None:
    criteria = pop_criteria(ctx, kwargs)
    payments, _ = summary_service(ctx).filtered_view(criteria)
    if not payments:
        click.echo("No payments match the filters; nothing to export.")
        return

    try:
        path = exporter(payments, output)
    except ValueError as e:
        handle_error(ctx, e)
    click.echo(f"Exported {len(payments)} payments to {path}")


@export_group.command("excel")
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@filter_options
@click.pass_context
def export_excel_command(ctx, output: str | None, **kwargs):
    """Export payments to an Excel workbook.

    Examples:
        paytrack export excel
        paytrack export excel --month 2024-02 -o subat.xlsx
    """
    _run_export(ctx, export_excel, output, kwargs)


@export_group.command("pdf")
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@filter_options
@click.pass_context
def export_pdf_command(ctx, output: str | None, **kwargs):
    """Export payments to a PDF report with a summary table.

    Examples:
        paytrack export pdf --include-paid
    """
    _run_export(ctx, export_pdf, output, kwargs)


@export_group.command("image")
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@filter_options
@click.pass_context
def export_image_command(ctx, output: str | None, **kwargs):
    """Export payments to a JPEG image of the table.

    Examples:
        paytrack export image --bank "Garanti Bankası"
    """
    _run_export(ctx, export_image, output, kwargs)


def register_commands(cli):
    """Register export commands with CLI."""
    cli.add_command(export_group)
