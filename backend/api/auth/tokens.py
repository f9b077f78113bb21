"""JWT bearer token generation and verification.

Tokens are issued by the surrounding auth provider; the `sub` claim is the
owner identity every narrative and upload is scoped by.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 30
DEV_SECRET = "dev-secret-change-in-production"


def get_secret_key() -> str:
    """Signing secret. Must be set via JWT_SECRET in production."""
    return os.getenv("JWT_SECRET") or DEV_SECRET


def create_access_token(owner_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token for an owner.

    Args:
        owner_id: The subject claim (the owner identity)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": owner_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, get_secret_key(), algorithm=ALGORITHM)


def verify_token(token: str) -> dict | None:
    """Verify a JWT token and return its payload.

    Returns:
        Decoded payload dict if valid, None if invalid/expired
    """
    try:
        return jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        return None


def get_owner_id(token: str) -> str | None:
    """Owner identity from a token, or None if the token is invalid or has no subject."""
    payload = verify_token(token)
    if not payload:
        return None
    return payload.get("sub") or None
