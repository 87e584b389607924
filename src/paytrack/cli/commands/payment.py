"""Payment management commands."""

import click
from datetime import date
from paytrack.cli.category_resolution import ensure_category_value
from paytrack.cli.error_handling import handle_error
from paytrack.cli.filters import filter_options, pop_criteria
from paytrack.cli.session import (
    category_service,
    payment_service,
    save_state,
    summary_service,
)
from paytrack.domain.entities import CategoryKind, Payment, PaymentStatus
from paytrack.domain.errors import PermissionDenied
from paytrack.utils.amount_parser import format_lira, parse_amount
from paytrack.utils.date_parser import parse_date

SHORT_ID_LENGTH = 8


def format_payment_line(payment: Payment) -> str:
    """Format a payment as one row of the payment table."""
    return (
        f"{payment.id[:SHORT_ID_LENGTH]:8s} | "
        f"{payment.due_date.strftime('%d.%m.%Y'):10s} | "
        f"{payment.check_number[:12]:12s} | "
        f"{payment.bank[:16]:16s} | "
        f"{payment.company[:16]:16s} | "
        f"{payment.business_group[:12]:12s} | "
        f"{format_lira(payment.amount):>14s} | "
        f"{payment.status.label}"
    )


def _parse_due_date_option(ctx, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _parse_amount_option(ctx, value: str) -> float:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@click.command("add")
@click.option("--due-date", "due_date", required=True, help="Due date (DD.MM.YYYY, YYYY-MM-DD or 'today')")
@click.option("--check-number", required=True, help="Check number")
@click.option("--bank", required=True, help="Bank name")
@click.option("--company", required=True, help="Company name")
@click.option("--business-group", required=True, help="Business group")
@click.option("--amount", required=True, help="Amount (e.g. 1500, 1.234,56 or 1,234.56)")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_payment(
    ctx,
    due_date: str,
    check_number: str,
    bank: str,
    company: str,
    business_group: str,
    amount: str,
    description: str,
) -> None:
    """Add a payment.

    Bank, company and business group must be existing category items.

    Examples:
        paytrack add --due-date 15.02.2024 --check-number CK-001 \\
            --bank "Garanti Bankası" --company "Şirket A" \\
            --business-group "Grup 1" --amount 1500
    """
    categories = category_service(ctx)
    for kind, value in (
        (CategoryKind.BANK, bank),
        (CategoryKind.COMPANY, company),
        (CategoryKind.BUSINESS_GROUP, business_group),
    ):
        ensure_category_value(ctx, categories, kind, value)

    parsed_date = _parse_due_date_option(ctx, due_date)
    parsed_amount = _parse_amount_option(ctx, amount)

    try:
        payment = payment_service(ctx).create_payment(
            due_date=parsed_date,
            check_number=check_number,
            bank=bank,
            company=company,
            business_group=business_group,
            amount=parsed_amount,
            description=description,
        )
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Added payment {payment.id[:SHORT_ID_LENGTH]} ({payment.check_number}, {format_lira(payment.amount)})")


@click.command("edit")
@click.argument("payment_id")
@click.option("--due-date", "due_date", help="New due date")
@click.option("--check-number", help="New check number")
@click.option("--bank", help="New bank")
@click.option("--company", help="New company")
@click.option("--business-group", help="New business group")
@click.option("--amount", help="New amount")
@click.option("--description", help="New description (use \"\" to clear)")
@click.pass_context
def edit_payment(
    ctx,
    payment_id: str,
    due_date: str | None,
    check_number: str | None,
    bank: str | None,
    company: str | None,
    business_group: str | None,
    amount: str | None,
    description: str | None,
) -> None:
    """Edit a payment.

    PAYMENT_ID can be the full ID or a unique prefix. Only the given fields
    change; the status is kept.

    Examples:
        paytrack edit 3f2a9c1b --amount 2000
        paytrack edit 3f2a9c1b --due-date 01.03.2024 --description ""
    """
    categories = category_service(ctx)
    changes = {}
    for kind, value in (
        (CategoryKind.BANK, bank),
        (CategoryKind.COMPANY, company),
        (CategoryKind.BUSINESS_GROUP, business_group),
    ):
        if value is not None:
            changes[kind.payment_field] = ensure_category_value(ctx, categories, kind, value)

    if due_date is not None:
        changes["due_date"] = _parse_due_date_option(ctx, due_date)
    if amount is not None:
        changes["amount"] = _parse_amount_option(ctx, amount)
    if check_number is not None:
        changes["check_number"] = check_number.strip()
    if description is not None:
        changes["description"] = description.strip()

    if not changes:
        click.echo("Error: No changes given", err=True)
        ctx.exit(1)

    try:
        payment = payment_service(ctx).update_payment(payment_id, **changes)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Updated payment {payment.id[:SHORT_ID_LENGTH]}")


@click.command("delete")
@click.argument("payment_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: str, yes: bool) -> None:
    """Delete a payment.

    Examples:
        paytrack delete 3f2a9c1b
        paytrack delete 3f2a9c1b --yes
    """
    service = payment_service(ctx)
    try:
        payment = service.require_payment(payment_id)
    except ValueError as e:
        handle_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete payment {payment.check_number} ({format_lira(payment.amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_payment(payment.id)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Deleted payment {payment.id[:SHORT_ID_LENGTH]}")


def _set_status(ctx, payment_id: str, status: PaymentStatus | None) -> None:
    service = payment_service(ctx)
    try:
        if status is None:
            payment = service.toggle_status(payment_id)
        else:
            payment = service.set_status(payment_id, status)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Payment {payment.id[:SHORT_ID_LENGTH]} is now {payment.status.label.lower()}")


@click.command("pay")
@click.argument("payment_id")
@click.pass_context
def pay_payment(ctx, payment_id: str) -> None:
    """Mark a payment as paid."""
    _set_status(ctx, payment_id, PaymentStatus.PAID)


@click.command("unpay")
@click.argument("payment_id")
@click.pass_context
def unpay_payment(ctx, payment_id: str) -> None:
    """Mark a payment as unpaid."""
    _set_status(ctx, payment_id, PaymentStatus.PENDING)


@click.command("toggle")
@click.argument("payment_id")
@click.pass_context
def toggle_payment(ctx, payment_id: str) -> None:
    """Flip a payment between paid and unpaid."""
    _set_status(ctx, payment_id, None)


@click.command("list")
@filter_options
@click.option("--show-description", is_flag=True, help="Show descriptions below each payment")
@click.pass_context
def list_payments(ctx, show_description: bool, **kwargs) -> None:
    """List payments matching the filters.

    Paid payments are hidden unless --include-paid or --status paid is given.

    Examples:
        paytrack list
        paytrack list --month 2024-02 --bank "Garanti Bankası"
        paytrack list --include-paid --amount 150
    """
    criteria = pop_criteria(ctx, kwargs)
    payments, total = summary_service(ctx).filtered_view(criteria)

    if not payments:
        click.echo("No payments found.")
        return

    click.echo(
        f"{'ID':8s} | {'Due Date':10s} | {'Check No':12s} | {'Bank':16s} | "
        f"{'Company':16s} | {'Group':12s} | {'Amount':>14s} | Status"
    )
    click.echo("-" * 120)
    for payment in payments:
        click.echo(format_payment_line(payment))
        if show_description and payment.description:
            click.echo(f"         {payment.description}")
    click.echo("-" * 120)
    click.echo(f"{len(payments)} payment(s), total {format_lira(total)}")


def register_commands(cli):
    """Register payment commands with CLI."""
    cli.add_command(add_payment)
    cli.add_command(edit_payment)
    cli.add_command(delete_payment)
    cli.add_command(pay_payment)
    cli.add_command(unpay_payment)
    cli.add_command(toggle_payment)
    cli.add_command(list_payments)
