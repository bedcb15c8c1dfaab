"""JWT token issuance and validation.

Tokens are HS256-signed compact JWTs (header.payload.signature, each
segment base64url encoded) carrying a fixed claim set:

    id     principal ID
    sub    principal email
    email  principal email
    jti    random UUID v4, unique per issuance
    iat    issuance time (Unix seconds)
    nbf    same as iat
    exp    iat + 4 hours

plus ``iss`` and ``aud`` when an issuer or audience is configured.

The shared secret is injected once into a TokenIssuer and a TokenValidator
when the application starts. Both objects are immutable afterwards and
safe to share between requests.

Example:
    issuer = TokenIssuer(secret)
    validator = TokenValidator(secret)

    token = issuer.issue(user)
    result = validator.validate(token)
    if result.valid:
        print(result.claims.email)
"""

import logging
from datetime import datetime, timedelta

import jwt
from pydantic import ValidationError as PydanticValidationError

from ..config import MIN_SECRET_BYTES, Settings
from ..utils import isodatetime, uid
from .schemas import TokenClaims, TokenValidation, UserResponse

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=4)
REQUIRED_CLAIMS = ["id", "sub", "email", "jti", "exp"]


def _signing_key(secret: str | bytes) -> bytes:
    """Encode the shared secret and reject keys too short for HMAC-SHA256."""
    key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
    if len(key) < MIN_SECRET_BYTES:
        raise ValueError(f"JWT secret must be at least {MIN_SECRET_BYTES} bytes")
    return key


class TokenIssuer:
    """Builds signed access tokens for authenticated principals."""

    def __init__(
        self,
        secret: str | bytes,
        issuer: str | None = None,
        audience: str | None = None,
    ):
        self._key = _signing_key(secret)
        self._issuer = issuer
        self._audience = audience

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            settings.jwt_secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )

    def issue(self, principal: UserResponse, issued_at: datetime | None = None) -> str:
        """
        Issue a signed token for a principal.

        The caller must already have verified the principal's password.

        Args:
            principal: Authenticated user
            issued_at: Issuance time, defaults to now. Naive values are UTC.

        Returns:
            Encoded JWT string
        """
        if issued_at is None:
            issued_at = isodatetime.utcnow()

        iat = isodatetime.to_unix(issued_at)
        payload = {
            "id": principal.id,
            "sub": principal.email,
            "email": principal.email,
            "jti": uid.generate_uuid(),
            "iat": iat,
            "nbf": iat,
            "exp": iat + int(TOKEN_LIFETIME.total_seconds()),
        }
        if self._issuer is not None:
            payload["iss"] = self._issuer
        if self._audience is not None:
            payload["aud"] = self._audience

        return jwt.encode(payload, self._key, algorithm=ALGORITHM)


class TokenValidator:
    """Verifies bearer tokens against the shared secret.

    validate() never raises; every failure is reported through the
    returned TokenValidation so the HTTP layer can answer 401.
    """

    def __init__(
        self,
        secret: str | bytes,
        enforce_expiry: bool = True,
        issuer: str | None = None,
        validate_issuer: bool = True,
        audience: str | None = None,
        validate_audience: bool = True,
        leeway: int = 0,
    ):
        self._key = _signing_key(secret)
        self.enforce_expiry = enforce_expiry
        self._issuer = issuer
        self._check_issuer = validate_issuer and issuer is not None
        self._audience = audience
        self._check_audience = validate_audience and audience is not None
        self._leeway = leeway

        if not enforce_expiry:
            logger.warning("Token expiry enforcement is disabled; expired tokens will validate")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenValidator":
        return cls(
            settings.jwt_secret_key,
            enforce_expiry=settings.jwt_enforce_expiry,
            issuer=settings.jwt_issuer,
            validate_issuer=settings.jwt_validate_issuer,
            audience=settings.jwt_audience,
            validate_audience=settings.jwt_validate_audience,
            leeway=settings.jwt_clock_skew_seconds,
        )

    def validate(self, token: str) -> TokenValidation:
        """
        Validate a token's signature, structure and (optionally) lifetime.

        Args:
            token: Encoded JWT string

        Returns:
            TokenValidation with decoded claims when valid, or an error code
        """
        options = {
            "require": REQUIRED_CLAIMS,
            "verify_exp": self.enforce_expiry,
            "verify_iss": self._check_issuer,
            "verify_aud": self._check_audience,
        }
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                options=options,
                issuer=self._issuer if self._check_issuer else None,
                audience=self._audience if self._check_audience else None,
                leeway=self._leeway,
            )
        except jwt.ExpiredSignatureError:
            return TokenValidation(valid=False, error="token_expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            return TokenValidation(valid=False, error="invalid_token")

        try:
            claims = TokenClaims.model_validate(payload)
        except PydanticValidationError:
            return TokenValidation(valid=False, error="invalid_claims")

        return TokenValidation(valid=True, claims=claims)
