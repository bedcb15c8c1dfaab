"""Authentication Pydantic schemas for API validation."""

from .auth import (
    AuthResponse,
    TokenClaims,
    TokenValidation,
    UserBase,
    UserLogin,
    UserRegistration,
    UserResponse,
)

__all__ = [
    "UserBase",
    "UserRegistration",
    "UserLogin",
    "UserResponse",
    "TokenClaims",
    "TokenValidation",
    "AuthResponse",
]
