"""Authentication module for JWTBasic.

This module provides authentication functionality:
- Schema validation for registration and login payloads
- JWT token issuance and validation (HS256, 4 hour lifetime)
- Password hashing and verification
- Identity store interface and its SQLite implementation
- Bearer token guard for protected endpoints

Auth endpoints (mounted under /api/AuthManagement):
- POST /Register - Create account and return JWT token
- POST /Login - Authenticate and return JWT token
- GET /Me - Current principal from bearer token
"""

from . import schemas, service, token

__all__ = ["schemas", "service", "token"]
