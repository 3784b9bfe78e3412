from __future__ import annotations

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from vom_admin.core.config import settings
from vom_admin.services.user_accounts import now_utc


class SessionTokenError(ValueError):
    """Signed session credential failed verification."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def session_max_age() -> timedelta:
    return timedelta(days=settings.SESSION_EXPIRE_DAYS)


def create_session_token(*, uid: str, email: str, version: int) -> str:
    issued_at = now_utc()
    claims = {
        "sub": uid,
        "email": email,
        "ver": version,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + session_max_age()).timestamp()),
    }
    return jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALG)


def decode_session_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALG])
    except JWTError as exc:
        raise SessionTokenError("Invalid session") from exc
    if not payload.get("sub"):
        raise SessionTokenError("Invalid session payload")
    return payload
