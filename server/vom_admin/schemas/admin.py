from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AssignRoleRequest(BaseModel):
    user_id: int
    # Validated against the role registry by the assignment service.
    role: str
    reason: str | None = Field(default=None, max_length=500)


class AssignedUserOut(BaseModel):
    id: int
    uid: str
    email: str
    first_name: str
    last_name: str
    role: str
    previous_role: str


class AssignRoleResponse(BaseModel):
    success: bool = True
    message: str = "Role updated successfully"
    user: AssignedUserOut


class AdminUserOut(BaseModel):
    id: int
    uid: str
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class AdminUserListResponse(BaseModel):
    success: bool = True
    users: list[AdminUserOut]
    total: int


class RoleOut(BaseModel):
    key: str
    label: str
    description: str
    color: str
    icon: str
    level: int
    is_admin: bool
    permissions: dict[str, list[str]]


class AuditLogOut(BaseModel):
    id: int
    type: str
    action: str
    actor_uid: str
    actor_email: str | None = None
    actor_name: str | None = None
    actor_role: str | None = None
    target_member_id: int | None = None
    target_email: str | None = None
    target_name: str | None = None
    previous_role: str | None = None
    new_role: str | None = None
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
