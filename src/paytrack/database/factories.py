"""Database factory functions."""

import os
from pathlib import Path
from typing import Optional

from paytrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DIRECTORY = ".paytrack"
DEFAULT_FILENAME = "paytrack.db"


def default_database_path() -> Path:
    """Location used when neither --db-path nor PAYTRACK_DB_PATH is set."""
    return Path.home() / DEFAULT_DIRECTORY / DEFAULT_FILENAME


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    The path is taken from the argument, then from PAYTRACK_DB_PATH, then
    from default_database_path(). Missing parent directories are created.
    """
    path = Path(database_path or os.environ.get("PAYTRACK_DB_PATH") or default_database_path())
    path.expanduser().parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path.expanduser()}")
