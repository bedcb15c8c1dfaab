"""Custom exceptions for JWTBasic.

Every exception carries a human-readable message and an optional details
dict. The Flask error handlers in main.py turn them into JSON responses:

    {"error": {"type": "<class name>", "message": "...", "details": {...}}}
"""


class JWTBasicError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(JWTBasicError):
    """Request payload failed validation (400)."""


class ConflictError(JWTBasicError):
    """Username or email is already registered (409)."""


class AuthenticationError(JWTBasicError):
    """Credentials or Authorization header rejected (401)."""


class TokenError(AuthenticationError):
    """Bearer token is malformed, tampered with, or expired (401)."""


class DatabaseError(JWTBasicError):
    """Identity store could not be initialised (500)."""
