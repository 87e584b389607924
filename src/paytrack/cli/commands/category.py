"""Category management commands."""

import click
from paytrack.cli.category_resolution import (
    cli_category_name,
    category_kind_type,
    resolve_category_kind,
)
from paytrack.cli.error_handling import handle_error
from paytrack.cli.session import category_service, save_state
from paytrack.domain.errors import PermissionDenied
from paytrack.utils.amount_parser import format_lira


@click.group("category")
def category_group():
    """Manage banks, companies and business groups."""
    pass


@category_group.command("list")
@click.argument("kind", type=category_kind_type, required=False)
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List category items.

    KIND is one of bank, company or business-group; all categories are
    listed when omitted.

    Examples:
        paytrack category list
        paytrack category list bank
    """
    service = category_service(ctx)
    categories = service.list_categories()
    if kind is not None:
        categories = [service.get_category(resolve_category_kind(kind))]

    for category in categories:
        click.echo(f"\n{category.name} ({cli_category_name(category.id)}):")
        if not category.items:
            click.echo("  (empty)")
        for position, item in enumerate(category.items, start=1):
            click.echo(f"  {position:3d}. {item}")


@category_group.command("add")
@click.argument("kind", type=category_kind_type)
@click.argument("item")
@click.pass_context
def add_item(ctx, kind: str, item: str):
    """Add an item to a category.

    Examples:
        paytrack category add bank "Ziraat Bankası"
        paytrack category add business-group "Grup 4"
    """
    try:
        category = category_service(ctx).add_item(resolve_category_kind(kind), item)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Added '{item.strip()}' to {category.name}")


@category_group.command("remove")
@click.argument("kind", type=category_kind_type)
@click.argument("item")
@click.pass_context
def remove_item(ctx, kind: str, item: str):
    """Remove an item from a category.

    Items still used by payments cannot be removed.

    Examples:
        paytrack category remove company "Şirket C"
    """
    try:
        category = category_service(ctx).remove_item(resolve_category_kind(kind), item)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Removed '{item}' from {category.name}")


@category_group.command("rename")
@click.argument("kind", type=category_kind_type)
@click.argument("item")
@click.argument("new_name")
@click.pass_context
def rename_item(ctx, kind: str, item: str, new_name: str):
    """Rename a category item that no payment uses yet.

    Examples:
        paytrack category rename bank "Is Bankasi" "İş Bankası"
    """
    try:
        category = category_service(ctx).rename_item(
            resolve_category_kind(kind), item, new_name
        )
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Renamed '{item}' to '{new_name.strip()}' in {category.name}")


@category_group.command("move")
@click.argument("kind", type=category_kind_type)
@click.argument("item")
@click.argument("position", type=int)
@click.pass_context
def move_item(ctx, kind: str, item: str, position: int):
    """Move an item to POSITION (1 is the top of the list).

    Examples:
        paytrack category move bank "Ziraat Bankası" 1
    """
    try:
        category = category_service(ctx).move_item(
            resolve_category_kind(kind), item, position - 1
        )
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Moved '{item}' to position {position} in {category.name}")


@category_group.command("stats")
@click.argument("kind", type=category_kind_type)
@click.option("--search", help="Only show items containing this text")
@click.pass_context
def item_stats(ctx, kind: str, search: str | None):
    """Show how many payments use each item and their total amount.

    Examples:
        paytrack category stats company
        paytrack category stats bank --search garanti
    """
    stats = category_service(ctx).item_stats(resolve_category_kind(kind), search=search)
    if not stats:
        click.echo("No items found.")
        return

    click.echo(f"{'Item':40s} {'Payments':>8s} {'Total':>18s}")
    click.echo("-" * 68)
    for entry in stats:
        click.echo(f"{entry.item:40s} {entry.usage:8d} {format_lira(entry.total_amount):>18s}")


def register_commands(cli):
    """Register category commands with CLI."""
    cli.add_command(category_group)
