"""Database module for JWTBasic.

Core wraps a single SQLite connection and exposes table operations.
It is always used as a context manager so every request opens, commits
(or rolls back) and closes its own connection:

    with get_core() as core:
        row = core.users.get_by_identifier("alice")

The identity store schema lives in ../schema/schema.sql and is applied
once by init_db() when the application starts.
"""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from flask import current_app

from ..exceptions import DatabaseError

if TYPE_CHECKING:
    from .user import UserOperations

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "schema.sql"


class Core:
    """
    Database Core with table operations.

    Connection Lifecycle:
    - Commits on clean __exit__, rolls back if an exception escaped
    - Connection is always closed on __exit__
    """

    def __init__(self, connection: sqlite3.Connection):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = connection
        self._user_ops = None

    @property
    def users(self) -> "UserOperations":
        """User table operations.

        Created on first access and cached.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn)
        return self._user_ops

    def __enter__(self) -> "Core":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()


def _create_connection(database_path: str) -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.
    """
    db_path = Path(database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(database_path: str | None = None) -> Core:
    """
    Get a database Core instance.

    Args:
        database_path: SQLite file to open. Defaults to the current Flask
            app's DATABASE_PATH config value.

    Returns:
        Core that must be used as a context manager
    """
    if database_path is None:
        database_path = current_app.config["DATABASE_PATH"]
    return Core(_create_connection(database_path))


def apply_schema(conn: sqlite3.Connection) -> None:
    """Run schema.sql against an open connection."""
    with open(SCHEMA_PATH, "r") as f:
        schema_sql = f.read()
    conn.executescript(schema_sql)
    conn.commit()


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db(database_path: str) -> None:
    """Initialize database by running schema.sql if not already initialized.

    Raises:
        DatabaseError: If the database file cannot be opened or the schema
            cannot be applied
    """
    db_path = Path(database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        conn = sqlite3.connect(str(db_path))
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
            )
            if cursor.fetchone():
                # Database already initialized, skip
                return
            apply_schema(conn)
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise DatabaseError(
            "Failed to initialize database",
            {"database_path": str(db_path), "reason": str(e)}
        ) from e

    logger.info(f"Database schema applied at {db_path}")
