"""CLI helpers for payment filter criteria."""

import click

from paytrack.domain.entities import FilterCriteria, PaymentStatus
from paytrack.utils.date_parser import parse_month


def filter_options(command):
    """Attach the shared payment filter options to a command."""
    options = [
        click.option("--month", help="Due month (YYYY-MM)"),
        click.option("--check-number", help="Check number contains (case-insensitive)"),
        click.option("--bank", "banks", multiple=True, help="Bank (repeatable)"),
        click.option("--company", "companies", multiple=True, help="Company (repeatable)"),
        click.option(
            "--business-group",
            "business_groups",
            multiple=True,
            help="Business group (repeatable)",
        ),
        click.option("--description", help="Description contains (case-insensitive)"),
        click.option("--amount", help="Amount contains, e.g. '150' matches 1500"),
        click.option(
            "--status",
            type=click.Choice([s.value for s in PaymentStatus], case_sensitive=False),
            help="Payment status",
        ),
        click.option("--include-paid", is_flag=True, help="Include paid payments"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_cli_criteria(
    ctx,
    *,
    month: str | None,
    check_number: str | None,
    banks: tuple[str, ...],
    companies: tuple[str, ...],
    business_groups: tuple[str, ...],
    description: str | None,
    amount: str | None,
    status: str | None,
    include_paid: bool,
) -> FilterCriteria:
    """Build FilterCriteria from CLI option values."""
    month_value = None
    if month:
        try:
            month_value = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)

    status_value = PaymentStatus(status.lower()) if status else None

    return FilterCriteria(
        month=month_value,
        check_number=check_number or None,
        banks=frozenset(banks),
        companies=frozenset(companies),
        business_groups=frozenset(business_groups),
        description=description or None,
        amount=amount or None,
        status=status_value,
        # Asking for paid payments implies showing them.
        include_paid=include_paid or status_value is PaymentStatus.PAID,
    )


FILTER_OPTION_NAMES = (
    "month",
    "check_number",
    "banks",
    "companies",
    "business_groups",
    "description",
    "amount",
    "status",
    "include_paid",
)


def pop_criteria(ctx, kwargs: dict) -> FilterCriteria:
    """Remove filter option values from kwargs and build FilterCriteria."""
    values = {name: kwargs.pop(name) for name in FILTER_OPTION_NAMES}
    return resolve_cli_criteria(ctx, **values)
