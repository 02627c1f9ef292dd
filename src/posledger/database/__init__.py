"""Database layer for posledger."""

from posledger.database.base import Database
from posledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
