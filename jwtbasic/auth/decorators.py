"""Authentication decorators for protected endpoints.

@auth_required requires a valid bearer token:

    Authorization: Bearer <token>

The token is checked by the TokenValidator the application factory
stored in ``app.extensions["token_validator"]``.
"""

import logging
from functools import wraps

from flask import current_app, g, request

from ..exceptions import AuthenticationError, TokenError
from .schemas import TokenClaims
from .token import TokenValidator

logger = logging.getLogger(__name__)

EXPECTED_HEADER = "Authorization: Bearer <token>"


def get_token_validator() -> TokenValidator:
    return current_app.extensions["token_validator"]


def extract_bearer_token(auth_header: str | None) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        AuthenticationError: If the header is missing or not a Bearer header
    """
    if not auth_header:
        raise AuthenticationError(
            "Authentication required",
            {"code": "missing_auth", "expected": EXPECTED_HEADER}
        )

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthenticationError(
            "Invalid authorization header format",
            {"code": "invalid_auth_header", "expected": EXPECTED_HEADER}
        )

    return parts[1]


def _authenticate_request() -> TokenClaims:
    """
    Validate the request's bearer token.

    Stores authenticated principal information in flask.g:
    - g.claims: decoded TokenClaims
    - g.user_id: principal ID (the ``id`` claim)

    Raises:
        AuthenticationError: If the Authorization header is missing or malformed
        TokenError: If the token is invalid or expired
    """
    token_str = extract_bearer_token(request.headers.get("Authorization"))

    result = get_token_validator().validate(token_str)
    if not result.valid:
        logger.warning(f"Rejected bearer token ({result.error}): {token_str[:10]}...")
        message = "Token has expired" if result.error == "token_expired" else "Invalid token"
        raise TokenError(message, {"code": result.error})

    g.claims = result.claims
    g.user_id = result.claims.id
    return result.claims


def auth_required(f):
    """
    Decorator to require a valid bearer token for endpoint access.

    Example:
    ```python
    @auth_bp.get("/Me")
    @auth_required
    def me():
        return jsonify({"user_id": g.user_id})
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return wrapper
