"""Role reassignment.

The update is a plain read-modify-write on the target row with no locking;
two concurrent assignments to the same account resolve as last write wins.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from vom_admin.auth.errors import AuthenticationAbsent, PrivilegeEscalationRejected
from vom_admin.auth.permissions import can_modify_role
from vom_admin.auth.roles import DEFAULT_ROLE, Role, parse_role
from vom_admin.models.audit_log import AuditLog
from vom_admin.models.member import Member
from vom_admin.services.audit import record_role_assignment
from vom_admin.services.sessions import SessionUser
from vom_admin.services.user_accounts import now_utc


@dataclass(frozen=True)
class RoleAssignmentResult:
    member: Member
    previous_role: str
    new_role: str
    audit: AuditLog


def assign_role(
    db: Session,
    *,
    actor: SessionUser,
    target_id: int,
    new_role: str,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> RoleAssignmentResult:
    actor_role = parse_role(actor.role)
    if actor_role is None:
        raise AuthenticationAbsent("Unknown role")
    if actor_role is not Role.SUPER_ADMIN:
        raise PrivilegeEscalationRejected(
            "Only super admins can assign roles",
            reason=PrivilegeEscalationRejected.NOT_SUPER_ADMIN,
        )

    role = parse_role(new_role)
    if role is None:
        valid = ", ".join(item.value for item in Role)
        raise PrivilegeEscalationRejected(
            f"Invalid role. Must be one of: {valid}",
            reason=PrivilegeEscalationRejected.UNKNOWN_ROLE,
        )

    target = db.get(Member, target_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with ID {target_id} not found")

    previous_role = target.role or DEFAULT_ROLE.value
    if not can_modify_role(actor_role, previous_role):
        raise PrivilegeEscalationRejected(
            "You do not have permission to modify this user's role",
            reason=PrivilegeEscalationRejected.TARGET_NOT_MODIFIABLE,
        )
    if target.uid == actor.uid:
        raise PrivilegeEscalationRejected(
            "You cannot change your own role",
            reason=PrivilegeEscalationRejected.SELF_MODIFICATION,
        )

    target.role = role.value
    target.updated_at = now_utc()
    audit = record_role_assignment(
        db,
        actor=actor,
        target=target,
        previous_role=previous_role,
        new_role=role.value,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.commit()
    db.refresh(target)
    return RoleAssignmentResult(member=target, previous_role=previous_role, new_role=role.value, audit=audit)
