"""Database layer for betconta application."""

from betconta.database.base import Database
from betconta.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
