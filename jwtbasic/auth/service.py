"""Authentication service: password hashing, identity store and orchestration.

The HTTP layer never touches SQL or bcrypt directly. It talks to an
IdentityStore (find_by_identifier / verify_secret / create) and calls
register_user() or login_user(), which hand verified principals to a
TokenIssuer.
"""

import logging
import sqlite3
from typing import Protocol

import bcrypt

from ..db.user import UserOperations
from ..exceptions import AuthenticationError, ConflictError
from .schemas import UserLogin, UserRegistration, UserResponse
from .token import TokenIssuer

logger = logging.getLogger(__name__)

DEFAULT_WORK_FACTOR = 12


# ============================================================================
# Password Hashing
# ============================================================================


def hash_password(password: str, rounds: int = DEFAULT_WORK_FACTOR) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash.

    Malformed hashes and over-long passwords verify as False.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# ============================================================================
# Identity Store
# ============================================================================


class IdentityStore(Protocol):
    """Credential storage used by registration and login."""

    def find_by_identifier(self, identifier: str) -> UserResponse | None:
        """Return the principal whose username or email is ``identifier``."""

    def verify_secret(self, principal: UserResponse, secret: str) -> bool:
        """Return True when ``secret`` matches the principal's stored hash."""

    def create(self, data: UserRegistration) -> UserResponse:
        """Store a new principal. Raises ConflictError on duplicates."""


class SQLiteIdentityStore:
    """IdentityStore backed by the users table."""

    def __init__(self, users: UserOperations, work_factor: int = DEFAULT_WORK_FACTOR):
        self._users = users
        self._work_factor = work_factor

    def find_by_identifier(self, identifier: str) -> UserResponse | None:
        row = self._users.get_by_identifier(identifier)
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: str) -> UserResponse | None:
        row = self._users.get_by_id(user_id)
        return _row_to_user(row) if row else None

    def verify_secret(self, principal: UserResponse, secret: str) -> bool:
        password_hash = self._users.get_password_hash(principal.id)
        if password_hash is None:
            return False
        return verify_password(secret, password_hash)

    def create(self, data: UserRegistration) -> UserResponse:
        password_hash = hash_password(data.password, rounds=self._work_factor)
        try:
            user_id = self._users.create(data.username, data.email, password_hash)
        except sqlite3.IntegrityError as e:
            # Lost a race with a concurrent registration
            raise ConflictError(
                "Username or email already exists",
                {"username": data.username, "email": data.email}
            ) from e

        return _row_to_user(self._users.get_by_id(user_id))


def _row_to_user(row: sqlite3.Row) -> UserResponse:
    return UserResponse(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        created_at=row["created_at"],
    )


# ============================================================================
# Registration and Login
# ============================================================================


def register_user(
    store: IdentityStore,
    issuer: TokenIssuer,
    data: UserRegistration,
) -> tuple[UserResponse, str]:
    """
    Register a new principal and issue its first token.

    Args:
        store: Identity store
        issuer: Token issuer
        data: Validated registration payload

    Returns:
        Tuple of (created principal, token)

    Raises:
        ConflictError: If the username or email is already registered
    """
    if store.find_by_identifier(data.username) is not None:
        raise ConflictError("Username already exists", {"username": data.username})
    if store.find_by_identifier(data.email) is not None:
        raise ConflictError("Email already exists", {"email": data.email})

    user = store.create(data)
    return user, issuer.issue(user)


def authenticate(store: IdentityStore, identifier: str, password: str) -> UserResponse:
    """
    Verify credentials and return the principal.

    Unknown identifiers and wrong passwords raise the same error so callers
    cannot tell which one happened.

    Raises:
        AuthenticationError: If the credentials do not match a principal
    """
    user = store.find_by_identifier(identifier)
    if user is None or not store.verify_secret(user, password):
        raise AuthenticationError("Invalid credentials.")
    return user


def login_user(
    store: IdentityStore,
    issuer: TokenIssuer,
    data: UserLogin,
) -> tuple[UserResponse, str]:
    """Authenticate a login payload and issue a token.

    Raises:
        AuthenticationError: If the credentials are invalid
    """
    user = authenticate(store, data.username, data.password)
    return user, issuer.issue(user)
