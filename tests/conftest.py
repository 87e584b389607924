"""Shared pytest fixtures for paytrack tests."""

import tempfile
import os
from datetime import date
import pytest

from paytrack.database.factories import create_sqlite_database
from paytrack.domain.category import CategoryService
from paytrack.domain.entities import Permissions
from paytrack.domain.payment import PaymentService
from paytrack.domain.state import AppState
from paytrack.domain.summary import SummaryService
from paytrack.domain.user import UserService

ADMIN_PASSWORD = "123456"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PAYTRACK_* variables of the developer's shell out of the tests."""
    for name in (
        "PAYTRACK_DB_PATH",
        "PAYTRACK_USER",
        "PAYTRACK_PASSWORD",
        "PAYTRACK_ADMIN_PASSWORD",
        "PAYTRACK_BACKUP_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def state():
    """Create a fresh application state with the default admin."""
    return AppState.seeded(ADMIN_PASSWORD)


@pytest.fixture
def admin(state):
    """Return the seeded admin user."""
    return state.users[0]


@pytest.fixture
def payment_service(state, admin):
    """Create a PaymentService acting as admin."""
    return PaymentService(state, admin)


@pytest.fixture
def category_service(state, admin):
    """Create a CategoryService acting as admin."""
    return CategoryService(state, admin)


@pytest.fixture
def user_service(state, admin):
    """Create a UserService acting as admin."""
    return UserService(state, admin)


@pytest.fixture
def summary_service(state):
    """Create a SummaryService over the session state."""
    return SummaryService(state)


@pytest.fixture
def viewer(user_service):
    """Create a user without any permission."""
    return user_service.create_user("viewer", "viewer-pass", Permissions())


@pytest.fixture
def sample_payments(payment_service):
    """Create a few payments across banks, companies and months."""
    specs = [
        (date(2024, 1, 10), "CK-001", "Halk Bankası", "ALTAY", "KULU", 1500.0, "Beton"),
        (date(2024, 1, 25), "CK-002", "Ziraat Bankası", "ALTAY", "AKSARAY", 250.0, ""),
        (date(2024, 2, 5), "CK-003", "Halk Bankası", "ONURAY İNŞAAT", "KULU", 4000.0, "Demir"),
        (date(2024, 2, 20), "AB-104", "Deniz Bank", "DOĞU İNŞAAT", "ESENYURT", 99.5, "Nakliye"),
    ]
    return [
        payment_service.create_payment(
            due_date=due_date,
            check_number=check_number,
            bank=bank,
            company=company,
            business_group=group,
            amount=amount,
            description=description,
        )
        for due_date, check_number, bank, company, group, amount, description in specs
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def db_path(tmp_path):
    """Path of a database file the CLI creates on first use."""
    return str(tmp_path / "paytrack.db")


@pytest.fixture
def run_cli(cli_runner, db_path):
    """Invoke the CLI logged in as the seeded admin."""
    from paytrack.cli.main import cli

    def invoke(*args, user="admin", password=ADMIN_PASSWORD, input=None):
        return cli_runner.invoke(
            cli,
            ["--db-path", db_path, "--user", user, "--password", password, *args],
            input=input,
        )

    return invoke
