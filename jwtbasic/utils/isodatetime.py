"""ISO 8601 and Unix timestamp conversion utilities.

Stored timestamps are ISO 8601 UTC strings with a ``Z`` suffix; token
claims (iat, nbf, exp) are integer Unix timestamps.
"""

from datetime import datetime, UTC


def to_timestamp(dt: datetime) -> str:
    """Convert datetime to ISO 8601 UTC timestamp string."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.isoformat().replace("+00:00", "Z")


def to_datetime(timestamp: str) -> datetime:
    """Convert ISO 8601 UTC timestamp string to datetime."""
    return datetime.fromisoformat(timestamp.replace('Z', '+00:00'))


def now() -> str:
    """Get current UTC timestamp as ISO 8601 string."""
    return to_timestamp(datetime.now(UTC))


def utcnow() -> datetime:
    """Get current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_unix(dt: datetime) -> int:
    """Convert datetime to integer Unix timestamp. Naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp())


def now_unix() -> int:
    """Get current time as integer Unix timestamp."""
    return to_unix(utcnow())
