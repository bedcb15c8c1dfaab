"""Pydantic schemas for registration, login and token payloads."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# bcrypt ignores (or rejects) input beyond 72 bytes
PASSWORD_MAX_BYTES = 72


# ============================================================================
# User Schemas
# ============================================================================


class UserBase(BaseModel):
    """Fields shared by registration input and principal output."""

    username: str = Field(..., min_length=2, max_length=50)
    email: str = Field(..., max_length=254)


class UserRegistration(UserBase):
    """Registration payload: username, email and password."""

    password: str = Field(..., min_length=8)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Allow letters, digits, hyphen, underscore and dot; lowercase it."""
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username can only contain letters, numbers, hyphens, underscores and dots"
            )
        return v.lower()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Email must be a valid email address")
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Require upper, lower, digit and symbol; cap at bcrypt's input limit."""
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        if not any(c.isupper() for c in v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not any(c.islower() for c in v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        if all(c.isalnum() for c in v):
            raise ValueError("Password must contain at least one non-alphanumeric character")
        return v


class UserLogin(BaseModel):
    """Login payload. ``username`` may also be the account's email address."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(UserBase):
    """An authenticated principal. Never carries the password hash."""

    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Token Schemas
# ============================================================================


class TokenClaims(BaseModel):
    """Decoded JWT payload."""

    id: str
    sub: str
    email: str
    jti: str
    exp: int
    iat: int | None = None
    nbf: int | None = None
    iss: str | None = None
    aud: str | list[str] | None = None


class TokenValidation(BaseModel):
    """Outcome of validating a bearer token.

    ``error`` is one of ``token_expired``, ``invalid_token`` or
    ``invalid_claims`` when ``valid`` is False.
    """

    valid: bool
    claims: TokenClaims | None = None
    error: str | None = None


class AuthResponse(BaseModel):
    """Body returned by successful registration and login."""

    result: bool = True
    token: str
    token_type: Literal["bearer"] = "bearer"
    user: UserResponse
