from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from vom_admin.auth.deps import get_current_user, require_access, require_super_admin
from vom_admin.auth.permissions import get_role_permissions
from vom_admin.auth.roles import ADMIN_ROLES, ROLE_CONFIG, Action, Resource, is_admin_role
from vom_admin.core.db import get_db
from vom_admin.models.member import Member
from vom_admin.schemas.admin import (
    AdminUserListResponse,
    AdminUserOut,
    AssignedUserOut,
    AssignRoleRequest,
    AssignRoleResponse,
    AuditLogOut,
    RoleOut,
)
from vom_admin.services.audit import list_role_assignments
from vom_admin.services.role_assignment import assign_role
from vom_admin.services.sessions import SessionUser
from vom_admin.services.user_accounts import LIKE_ESCAPE, contains_pattern

router = APIRouter(prefix="/admin", tags=["admin"])


def _client_ip(request: Request) -> str | None:
    # First hop of a proxy chain is the originating client.
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/assign-role", response_model=AssignRoleResponse)
def assign_role_endpoint(
    payload: AssignRoleRequest,
    request: Request,
    actor: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AssignRoleResponse:
    result = assign_role(
        db,
        actor=actor,
        target_id=payload.user_id,
        new_role=payload.role,
        reason=payload.reason,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    member = result.member
    return AssignRoleResponse(
        user=AssignedUserOut(
            id=member.id,
            uid=member.uid,
            email=member.email,
            first_name=member.first_name,
            last_name=member.last_name,
            role=member.role,
            previous_role=result.previous_role,
        )
    )


@router.get("/users", response_model=AdminUserListResponse)
def list_admin_users(
    search: str | None = Query(default=None, description="Search by name or email"),
    _: SessionUser = Depends(require_super_admin),
    db: Session = Depends(get_db),
) -> AdminUserListResponse:
    query = db.query(Member)
    term = search.strip().lower() if search else ""
    if term:
        pattern = contains_pattern(term)
        query = query.filter(
            or_(
                func.lower(Member.first_name + " " + Member.last_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(Member.email).like(pattern, escape=LIKE_ESCAPE),
            )
        )
    else:
        query = query.filter(Member.role.in_([role.value for role in ADMIN_ROLES]))
    users = query.order_by(func.lower(Member.first_name).asc(), Member.id.asc()).all()
    return AdminUserListResponse(
        users=[AdminUserOut.model_validate(user) for user in users],
        total=len(users),
    )


@router.get("/roles", response_model=list[RoleOut])
def list_roles(_: SessionUser = Depends(require_access(Resource.ROLES, Action.VIEW))) -> list[RoleOut]:
    roles: list[RoleOut] = []
    for role, config in ROLE_CONFIG.items():
        roles.append(
            RoleOut(
                key=role.value,
                label=config.label,
                description=config.description,
                color=config.color,
                icon=config.icon,
                level=config.level,
                is_admin=is_admin_role(role),
                permissions={
                    resource.value: sorted(action.value for action in actions)
                    for resource, actions in get_role_permissions(role).items()
                },
            )
        )
    return roles


@router.get("/audit-logs", response_model=list[AuditLogOut])
def list_audit_logs(
    user_id: int | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    _: SessionUser = Depends(require_access(Resource.ROLES, Action.VIEW)),
    db: Session = Depends(get_db),
) -> list[AuditLogOut]:
    entries = list_role_assignments(db, member_id=user_id, limit=limit)
    return [AuditLogOut.model_validate(entry) for entry in entries]
