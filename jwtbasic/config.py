"""Configuration management using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# HMAC-SHA256 keys shorter than this are rejected at startup
MIN_SECRET_BYTES = 16

DEFAULT_JWT_SECRET = "change-me-in-production-use-env-var"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/jwtbasic.db"
    cors_origins: list[str] = ["http://localhost:3000"]

    # JWT Configuration
    jwt_secret_key: str = DEFAULT_JWT_SECRET

    # Validation switches. Turning jwt_enforce_expiry off makes expired
    # tokens validate; only meant for debugging against old fixtures.
    jwt_enforce_expiry: bool = True
    jwt_issuer: str | None = None
    jwt_validate_issuer: bool = True
    jwt_audience: str | None = None
    jwt_validate_audience: bool = True
    jwt_clock_skew_seconds: int = 0

    # Bcrypt work factor (higher = more secure but slower)
    # For tests, use 4 for faster execution while maintaining functionality
    bcrypt_work_factor: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_secret_length(cls, v: str) -> str:
        """Fail fast on an empty or short signing secret."""
        if len(v.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes"
            )
        return v

    @field_validator("jwt_clock_skew_seconds")
    @classmethod
    def validate_clock_skew(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Clock skew cannot be negative")
        return v


settings = Settings()
