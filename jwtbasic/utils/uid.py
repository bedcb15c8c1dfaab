"""UUID generation utilities.

This is the only module that imports uuid4. Principal ids and token
nonces (jti) both come from generate_uuid().
"""

from uuid import uuid4


def generate_uuid() -> str:
    """Generate a random UUID v4 as a string."""
    return str(uuid4())
