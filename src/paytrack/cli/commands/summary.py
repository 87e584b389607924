"""Summary commands."""

import click
from paytrack.cli.category_resolution import category_kind_type, resolve_category_kind
from paytrack.cli.filters import filter_options, pop_criteria
from paytrack.cli.session import summary_service
from paytrack.domain.entities import FilterCriteria, GroupTotal
from paytrack.domain.summary import filter_payments
from paytrack.utils.amount_parser import format_lira
from paytrack.utils.date_parser import parse_date


def _display_groups(title: str, groups: tuple[GroupTotal, ...]) -> None:
    click.echo(f"\n{title}:")
    if not groups:
        click.echo("  (none)")
        return
    for group in groups:
        click.echo(f"  {group.key:<40} {format_lira(group.amount):>18}")


@click.command("summary")
@click.option(
    "--group-by",
    type=category_kind_type,
    default="bank",
    show_default=True,
    help="Category to group totals by",
)
@click.option("--as-of", help="Reference date for the monthly figures (default: today)")
@filter_options
@click.pass_context
def summary(ctx, group_by: str, as_of: str | None, **kwargs):
    """Show payment totals and grouped totals.

    Without filter options every payment, paid or not, is summarised. With
    filter options only the matching payments are.

    Examples:
        paytrack summary
        paytrack summary --group-by company
        paytrack summary --as-of 2024-02-01 --bank "Garanti Bankası" --include-paid
    """
    today = None
    if as_of:
        try:
            today = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    criteria = pop_criteria(ctx, kwargs)
    service = summary_service(ctx)
    payments = None
    if criteria != FilterCriteria(include_paid=criteria.include_paid):
        payments = filter_payments(service.state.payments, criteria)

    report = service.build_report(
        today=today, group_by=resolve_category_kind(group_by), payments=payments
    )

    click.echo(f"Payments:          {report.count}")
    click.echo(f"Total amount:      {format_lira(report.total_amount)}")
    click.echo(f"Paid:              {format_lira(report.paid_amount)}")
    click.echo(f"Pending:           {format_lira(report.pending_amount)}")
    click.echo("\nThis month:")
    click.echo(f"  Total:           {format_lira(report.month_total)}")
    click.echo(f"  Paid:            {format_lira(report.month_paid)}")
    click.echo(f"  Pending:         {format_lira(report.month_pending)}")

    label = report.group_by.label
    _display_groups(f"All payments by {label.lower()}", report.all_groups)
    _display_groups(f"Paid by {label.lower()}", report.paid_groups)
    _display_groups(f"Pending by {label.lower()}", report.pending_groups)
    _display_groups(f"This month by {label.lower()}", report.month_groups)


def register_commands(cli):
    """Register summary commands with CLI."""
    cli.add_command(summary)
