from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config
from backend.core.errors import AuthenticationError


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=expire_minutes)
    payload = {"sub": subject, "exp": expire, "iat": issued_at}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])


def verify_access_token(token: str) -> str:
    """Return the user id carried by `token`, or raise AuthenticationError."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Not authorized, token failed") from exc

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Not authorized, token failed")
    return subject
