"""Shared test fixtures for jwtbasic."""

import os
import sqlite3
import tempfile

import pytest

from jwtbasic.auth import schemas, service
from jwtbasic.auth.token import TokenIssuer, TokenValidator
from jwtbasic.config import Settings
from jwtbasic.db import apply_schema
from jwtbasic.db.user import UserOperations
from jwtbasic.main import create_app

TEST_SECRET = "test-secret-key-0123456789abcdef"


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row
    db.execute("PRAGMA foreign_keys = ON")
    apply_schema(db)

    yield db

    db.close()


@pytest.fixture
def users(test_db):
    """UserOperations bound to the in-memory database."""
    return UserOperations(test_db)


@pytest.fixture
def store(users):
    """SQLite identity store with a fast bcrypt work factor."""
    return service.SQLiteIdentityStore(users, work_factor=4)


@pytest.fixture
def secret():
    """The shared signing secret used by test issuers and validators."""
    return TEST_SECRET


@pytest.fixture
def issuer():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def validator():
    return TokenValidator(TEST_SECRET)


@pytest.fixture
def registration():
    """A valid registration payload."""
    return schemas.UserRegistration(username="u1", email="u1@x.com", password="Passw0rd!")


@pytest.fixture
def test_user(store, registration):
    """Create a test user for authentication tests.

    Returns a tuple of (user, password) where user is the UserResponse
    schema and password is the plain text password.
    """
    user = store.create(registration)
    return user, registration.password


@pytest.fixture
def settings():
    """Settings pointing at a temp file database.

    Uses a temp file instead of :memory: so every request's connection
    sees the same data.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(db_path)

    yield Settings(
        database_path=db_path,
        jwt_secret_key=TEST_SECRET,
        bcrypt_work_factor=4,
    )

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Create test client for API testing."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def registered_client(client):
    """Test client with user u1 already registered.

    Returns a tuple of (client, register response body).
    """
    response = client.post(
        "/api/AuthManagement/Register",
        json={"username": "u1", "email": "u1@x.com", "password": "Passw0rd!"},
    )
    assert response.status_code == 200
    return client, response.get_json()


@pytest.fixture
def auth_headers(registered_client):
    """Authorization header carrying the registered user's token."""
    _client, body = registered_client
    return {"Authorization": f"Bearer {body['token']}"}
