from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from vom_admin.models.audit_log import AuditLog
from vom_admin.models.member import Member
from vom_admin.services.sessions import SessionUser
from vom_admin.services.user_accounts import now_utc

logger = logging.getLogger(__name__)


def _clip(value: str | None, column) -> str:
    """Fit a request header into its audit column."""

    text = (value or "").strip() or "unknown"
    return text[: column.type.length]


def record_role_assignment(
    db: Session,
    *,
    actor: SessionUser,
    target: Member,
    previous_role: str,
    new_role: str,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuditLog:
    """Add an audit entry for a role change; the caller owns the commit."""

    entry = AuditLog(
        type="role_assignment",
        action="assign_role",
        actor_uid=actor.uid,
        actor_email=actor.email,
        actor_name=actor.display_name,
        actor_role=actor.role,
        target_member_id=target.id,
        target_email=target.email,
        target_name=target.full_name,
        previous_role=previous_role,
        new_role=new_role,
        reason=reason,
        ip_address=_clip(ip_address, AuditLog.ip_address),
        user_agent=_clip(user_agent, AuditLog.user_agent),
        created_at=now_utc(),
    )
    db.add(entry)
    logger.info(
        "role_assigned",
        extra={
            "actor_uid": actor.uid,
            "target_member_id": target.id,
            "previous_role": previous_role,
            "new_role": new_role,
        },
    )
    return entry


def list_role_assignments(db: Session, *, member_id: int | None = None, limit: int = 50) -> list[AuditLog]:
    query = db.query(AuditLog).filter(AuditLog.type == "role_assignment")
    if member_id is not None:
        query = query.filter(AuditLog.target_member_id == member_id)
    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
