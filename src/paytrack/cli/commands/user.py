"""User account commands."""

import click
from paytrack.cli.error_handling import handle_error
from paytrack.cli.session import current_user, save_state, user_service
from paytrack.domain.entities import PERMISSION_NAMES, Permissions
from paytrack.domain.errors import PermissionDenied

PERMISSION_CHOICES = [name.replace("_", "-") for name in PERMISSION_NAMES]


def _build_permissions(perms: tuple[str, ...], all_permissions: bool) -> Permissions:
    if all_permissions:
        return Permissions.all()
    granted = {p.replace("-", "_") for p in perms}
    return Permissions(**{name: name in granted for name in PERMISSION_NAMES})


def _format_permissions(permissions: Permissions) -> str:
    granted = [name.replace("_", "-") for name in permissions.granted()]
    return ", ".join(granted) if granted else "(none)"


@click.group("user")
def user_group():
    """Manage user accounts and permissions."""
    pass


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List user accounts."""
    users = user_service(ctx).list_users()
    actor = current_user(ctx)

    click.echo(f"{'Username':20s} Permissions")
    click.echo("-" * 80)
    for user in users:
        marker = " *" if user.id == actor.id else ""
        click.echo(f"{user.username + marker:20s} {_format_permissions(user.permissions)}")


@user_group.command("create")
@click.argument("username")
@click.option(
    "--new-password",
    prompt="Password for the new user",
    hide_input=True,
    confirmation_prompt=True,
    help="Password of the new user",
)
@click.option(
    "--perm",
    "perms",
    multiple=True,
    type=click.Choice(PERMISSION_CHOICES),
    help="Permission to grant (repeatable)",
)
@click.option("--all-permissions", is_flag=True, help="Grant every permission")
@click.pass_context
def create_user(ctx, username: str, new_password: str, perms: tuple[str, ...], all_permissions: bool):
    """Create a user account.

    Examples:
        paytrack user create ayse --perm add --perm change-status
        paytrack user create mehmet --all-permissions
    """
    try:
        user = user_service(ctx).create_user(
            username, new_password, _build_permissions(perms, all_permissions)
        )
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Created user '{user.username}' ({_format_permissions(user.permissions)})")


@user_group.command("update")
@click.argument("username")
@click.option(
    "--perm",
    "perms",
    multiple=True,
    type=click.Choice(PERMISSION_CHOICES),
    help="Permission to grant (repeatable); replaces the current set",
)
@click.option("--all-permissions", is_flag=True, help="Grant every permission")
@click.option("--no-permissions", is_flag=True, help="Revoke every permission")
@click.option("--rename", "new_username", help="New username")
@click.pass_context
def update_user(
    ctx,
    username: str,
    perms: tuple[str, ...],
    all_permissions: bool,
    no_permissions: bool,
    new_username: str | None,
):
    """Update a user's permissions or username.

    Examples:
        paytrack user update ayse --perm add --perm edit
        paytrack user update ayse --no-permissions
        paytrack user update ayse --rename ayse.k
    """
    change_permissions = bool(perms) or all_permissions or no_permissions
    if not change_permissions and new_username is None:
        click.echo("Error: No changes given", err=True)
        ctx.exit(1)

    service = user_service(ctx)
    try:
        if change_permissions:
            user = service.update_permissions(
                username, _build_permissions(perms, all_permissions)
            )
            click.echo(f"Permissions of '{username}': {_format_permissions(user.permissions)}")
        if new_username is not None:
            user = service.rename_user(username, new_username)
            click.echo(f"Renamed '{username}' to '{user.username}'")
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)


@user_group.command("delete")
@click.argument("username")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_user(ctx, username: str, yes: bool):
    """Delete a user account.

    You cannot delete your own account.
    """
    if not yes and not click.confirm(f"Are you sure you want to delete user '{username}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        user_service(ctx).delete_user(username)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Deleted user '{username}'")


@user_group.command("passwd")
@click.argument("username", required=False)
@click.pass_context
def change_password(ctx, username: str | None):
    """Change a password.

    Without USERNAME your own password is changed after confirming the
    current one. Changing another user's password requires the
    manage-users permission.

    Examples:
        paytrack user passwd
        paytrack user passwd ayse
    """
    actor = current_user(ctx)
    username = username or actor.username

    current_password = None
    if username == actor.username:
        current_password = click.prompt("Current password", hide_input=True)
    new_password = click.prompt("New password", hide_input=True, confirmation_prompt=True)

    try:
        user_service(ctx).change_password(username, new_password, current_password)
    except (ValueError, PermissionDenied) as e:
        handle_error(ctx, e)

    save_state(ctx)
    click.echo(f"Password of '{username}' changed")


def register_commands(cli):
    """Register user commands with CLI."""
    cli.add_command(user_group)
