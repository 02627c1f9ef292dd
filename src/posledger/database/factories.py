"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from posledger.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "POSLEDGER_DB_PATH"


def default_database_path() -> str:
    """Resolve the SQLite path from POSLEDGER_DB_PATH or ~/.posledger/posledger.db."""
    database_path = os.environ.get(DB_PATH_ENV)
    if database_path is None:
        db_dir = Path.home() / ".posledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "posledger.db")
    return database_path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks POSLEDGER_DB_PATH
            environment variable, then defaults to ~/.posledger/posledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL (e.g. PostgreSQL)."""
    return SQLAlchemyDatabase(database_url)
