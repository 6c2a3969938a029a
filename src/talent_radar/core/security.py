"""JWT helpers for issuing and reading access tokens."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from jose import jwt

from talent_radar.core.settings import settings
from talent_radar.db.time import utcnow


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Mint a signed bearer token whose subject is the user's id.

    Args:
        user_id: Primary key of the user the token is issued for.
        expires_delta: Optional lifetime; defaults to the configured expiry.

    Returns:
        The encoded JWT string.
    """
    expire = utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a bearer token, raising ``JWTError`` when invalid."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
