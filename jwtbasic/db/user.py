"""User table operations.

IMPORT CONVENTION:
- Core exposes these through the core.users property
- Tests may construct UserOperations(conn) directly on a bare connection

Lookups by username and email are case-insensitive (COLLATE NOCASE on
both columns). User IDs are auto-generated UUIDs.
"""

import sqlite3

from ..utils import isodatetime, uid


class UserOperations:
    """Raw SQL operations on the users table."""

    def __init__(self, conn: sqlite3.Connection):
        """Initialize user operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = conn

    def create(self, username: str, email: str, password_hash: str) -> str:
        """Insert a user row with an auto-generated UUID.

        Args:
            username: Normalized (lowercase) username
            email: Normalized (lowercase) email address
            password_hash: Bcrypt hash of the password

        Returns:
            The new user ID (UUID v4 string)

        Raises:
            sqlite3.IntegrityError: If username or email already exists
        """
        user_id = uid.generate_uuid()
        self._conn.execute(
            """INSERT INTO users (id, username, email, password_hash, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (user_id, username, email, password_hash, isodatetime.now())
        )
        return user_id

    def get_by_id(self, user_id: str) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT id, username, email, created_at FROM users WHERE id = ?",
            (user_id,)
        )
        return cursor.fetchone()

    def get_by_username(self, username: str) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT id, username, email, created_at FROM users WHERE username = ?",
            (username,)
        )
        return cursor.fetchone()

    def get_by_email(self, email: str) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT id, username, email, created_at FROM users WHERE email = ?",
            (email,)
        )
        return cursor.fetchone()

    def get_by_identifier(self, identifier: str) -> sqlite3.Row | None:
        """Look up a user by username or email address.

        A username can never contain '@', so at most one row can match.
        """
        cursor = self._conn.execute(
            """SELECT id, username, email, created_at FROM users
               WHERE username = ? OR email = ?""",
            (identifier, identifier)
        )
        return cursor.fetchone()

    def get_password_hash(self, user_id: str) -> str | None:
        cursor = self._conn.execute(
            "SELECT password_hash FROM users WHERE id = ?",
            (user_id,)
        )
        row = cursor.fetchone()
        return row["password_hash"] if row else None

    def count(self) -> int:
        cursor = self._conn.execute("SELECT COUNT(*) FROM users")
        return cursor.fetchone()[0]
