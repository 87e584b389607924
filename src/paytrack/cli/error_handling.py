"""CLI error handling helpers."""

import click

from paytrack.domain.errors import DomainError, PermissionDenied


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_permission_denied(ctx: click.Context, error: PermissionDenied) -> None:
    """Render a refused action and exit with failure."""
    click.echo(f"Notice: {error}", err=True)
    ctx.exit(1)


def handle_error(ctx: click.Context, error: Exception) -> None:
    """Dispatch to the matching handler for errors raised by services."""
    if isinstance(error, PermissionDenied):
        handle_permission_denied(ctx, error)
    else:
        handle_domain_error(ctx, error)
