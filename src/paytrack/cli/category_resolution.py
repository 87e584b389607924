"""CLI helpers for category names and values."""

import click

from paytrack.domain.category import CategoryService
from paytrack.domain.entities import CategoryKind

CATEGORY_CHOICES = {
    "bank": CategoryKind.BANK,
    "company": CategoryKind.COMPANY,
    "business-group": CategoryKind.BUSINESS_GROUP,
}

category_kind_type = click.Choice(list(CATEGORY_CHOICES), case_sensitive=False)


def resolve_category_kind(name: str) -> CategoryKind:
    """Map a CLI category name to its CategoryKind."""
    return CATEGORY_CHOICES[name.lower()]


def cli_category_name(kind: CategoryKind) -> str:
    for name, value in CATEGORY_CHOICES.items():
        if value is kind:
            return name
    return kind.value


def ensure_category_value(
    ctx: click.Context, service: CategoryService, kind: CategoryKind, value: str
) -> str:
    """Exit with an error unless the value is one of the category's items."""
    if service.has_item(kind, value):
        return value
    click.echo(
        f"Error: Unknown {kind.label.lower()} '{value}'. "
        f"Add it with: paytrack category add {cli_category_name(kind)} \"{value}\"",
        err=True,
    )
    ctx.exit(1)
