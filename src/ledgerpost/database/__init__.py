"""Database layer for ledgerpost."""

from ledgerpost.database.base import Database
from ledgerpost.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
