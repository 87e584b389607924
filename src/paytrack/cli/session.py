"""CLI helpers for the per-invocation application session.

The database is opened and the user logged in the first time a command
asks for a service, so help output never needs credentials.
"""

import click

from paytrack.cli.error_handling import handle_domain_error
from paytrack.database.factories import create_sqlite_database
from paytrack.domain.category import CategoryService
from paytrack.domain.entities import User
from paytrack.domain.payment import PaymentService
from paytrack.domain.state import AppState
from paytrack.domain.summary import SummaryService
from paytrack.domain.user import UserService


def _login(ctx: click.Context) -> dict:
    obj = ctx.obj
    if "actor" in obj:
        return obj

    db = create_sqlite_database(database_path=obj.get("db_path"))
    db.connect()
    ctx.find_root().call_on_close(db.disconnect)
    db.initialize_schema()
    state = db.load_state()

    username = obj.get("username")
    if username is None:
        username = click.prompt("Username")
    password = obj.get("password")
    if password is None:
        password = click.prompt("Password", hide_input=True)
    try:
        actor = UserService(state).authenticate(username, password)
    except ValueError as e:
        handle_domain_error(ctx, e)

    obj["db"] = db
    obj["state"] = state
    obj["actor"] = actor
    return obj


def current_state(ctx: click.Context) -> AppState:
    return _login(ctx)["state"]


def current_user(ctx: click.Context) -> User:
    return _login(ctx)["actor"]


def payment_service(ctx: click.Context) -> PaymentService:
    return PaymentService(current_state(ctx), current_user(ctx))


def category_service(ctx: click.Context) -> CategoryService:
    return CategoryService(current_state(ctx), current_user(ctx))


def user_service(ctx: click.Context) -> UserService:
    return UserService(current_state(ctx), current_user(ctx))


def summary_service(ctx: click.Context) -> SummaryService:
    return SummaryService(current_state(ctx))


def save_state(ctx: click.Context) -> None:
    """Persist the session state after a successful mutation."""
    obj = _login(ctx)
    obj["db"].save_state(obj["state"])
