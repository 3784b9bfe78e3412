"""Session resolver.

A session is a signed, time-limited credential naming an account uid. The role
is never stored in the credential: every verification reads it from the
account record so a role change applies on the next request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from vom_admin.auth.errors import AuthenticationAbsent, AuthorizationDenied
from vom_admin.auth.roles import is_admin_role
from vom_admin.auth.security import (
    SessionTokenError,
    create_session_token,
    decode_session_token,
    verify_password,
)
from vom_admin.models.member import Member
from vom_admin.services.user_accounts import display_name, normalize_email, now_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    id: int
    uid: str
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        return display_name(self.first_name, self.last_name, self.email)

    @classmethod
    def from_member(cls, member: Member) -> "SessionUser":
        return cls(
            id=member.id,
            uid=member.uid,
            email=member.email,
            role=member.role or "user",
            first_name=member.first_name,
            last_name=member.last_name,
        )


def _find_by_uid(db: Session, uid: str) -> Member | None:
    return db.query(Member).filter(Member.uid == uid).first()


def create_session(db: Session, email: str, password: str) -> tuple[SessionUser, str]:
    member = db.query(Member).filter(func.lower(Member.email) == normalize_email(email)).first()
    if not member or not member.is_active or not verify_password(password, member.hashed_password):
        logger.info("session_rejected", extra={"email": email, "reason": "invalid_credentials"})
        raise AuthenticationAbsent("Invalid credentials")
    if not is_admin_role(member.role):
        logger.info("session_rejected", extra={"uid": member.uid, "reason": "not_admin", "role": member.role})
        raise AuthorizationDenied("Access denied. Admin privileges required.", role=member.role)

    member.last_login_at = now_utc()
    db.commit()
    db.refresh(member)

    token = create_session_token(uid=member.uid, email=member.email, version=member.session_version or 0)
    logger.info("session_created", extra={"uid": member.uid, "role": member.role})
    return SessionUser.from_member(member), token


def resolve_session(db: Session, token: str | None) -> SessionUser:
    if not token:
        raise AuthenticationAbsent("No session found")
    try:
        claims = decode_session_token(token)
    except SessionTokenError as exc:
        raise AuthenticationAbsent(str(exc)) from exc

    member = _find_by_uid(db, str(claims["sub"]))
    if member is None:
        raise AuthenticationAbsent("User not found")
    if not member.is_active:
        raise AuthenticationAbsent("Inactive user")
    if int(claims.get("ver", -1)) < (member.session_version or 0):
        logger.info("session_rejected", extra={"uid": member.uid, "reason": "revoked"})
        raise AuthenticationAbsent("Session revoked")
    return SessionUser.from_member(member)


def revoke_sessions(db: Session, uid: str) -> None:
    member = _find_by_uid(db, uid)
    if member is None:
        return
    member.session_version = (member.session_version or 0) + 1
    db.commit()
    logger.info("session_revoked", extra={"uid": uid})
