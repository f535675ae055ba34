"""Application data models exposed for easy imports."""
import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine

from claimflow import db  # noqa: F401
from .company import Company  # noqa: F401
from .user import User, UserRole  # noqa: F401
from .expense import Expense, ExpenseStatus  # noqa: F401


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign key enforcement switched off per connection.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


__all__ = [
    "db",
    "Company",
    "User",
    "UserRole",
    "Expense",
    "ExpenseStatus",
]
