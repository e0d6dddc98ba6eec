"""Bearer token helpers for the identity collaborator."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from civic_pulse.core.settings import settings


def create_access_token(user_id: int) -> str:
    """Create a JWT access token whose subject is the numeric user id."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> int:
    """Return the user id carried by ``token``.

    Raises:
        jose.JWTError: If the token is malformed, expired or badly signed.
        ValueError: If the subject is missing or not an integer.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    if subject is None:
        raise ValueError("Token has no subject")
    return int(subject)
