"""Role registry and the resource/action vocabulary.

Roles are ordered by authority level. The level is only used for display and
hierarchy comparisons; it says nothing about which resources a role may touch
(``treasury`` and ``programme`` share a level but not a permission set).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    PROGRAMME = "programme"
    TREASURY = "treasury"
    SECRETARIAT = "secretariat"
    USER = "user"


class Resource(str, Enum):
    MEMBERS = "members"
    PROGRAMMES = "programmes"
    BANDS = "bands"
    DEPARTMENTS = "departments"
    ANNOUNCEMENTS = "announcements"
    FIRST_TIMERS = "firstTimers"
    ROLES = "roles"
    SETTINGS = "settings"
    REPORTS = "reports"


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EXPORT = "export"
    PUBLISH = "publish"
    ASSIGN = "assign"


@dataclass(frozen=True)
class Permission:
    resource: Resource
    action: Action

    def __str__(self) -> str:
        return f"{self.resource.value}:{self.action.value}"


@dataclass(frozen=True)
class RoleConfig:
    label: str
    description: str
    color: str
    icon: str
    level: int


NEUTRAL_COLOR = "#6B7280"

ROLE_CONFIG: dict[Role, RoleConfig] = {
    Role.SUPER_ADMIN: RoleConfig(
        label="Super Admin",
        description="Full system access with role management",
        color="#DC2626",
        icon="shield-check",
        level=100,
    ),
    Role.ADMIN: RoleConfig(
        label="Admin",
        description="IT team members with administrative access",
        color="#2563EB",
        icon="user-shield",
        level=80,
    ),
    Role.PROGRAMME: RoleConfig(
        label="Programme",
        description="Programme department - event management",
        color="#7C3AED",
        icon="calendar",
        level=60,
    ),
    Role.TREASURY: RoleConfig(
        label="Treasury",
        description="Treasury department - financial oversight",
        color="#059669",
        icon="currency-dollar",
        level=60,
    ),
    Role.SECRETARIAT: RoleConfig(
        label="Secretariat",
        description="Secretariat - administrative support",
        color="#D97706",
        icon="clipboard-document-list",
        level=60,
    ),
    Role.USER: RoleConfig(
        label="User",
        description="Regular member - mobile app access only",
        color=NEUTRAL_COLOR,
        icon="user",
        level=10,
    ),
}

DEFAULT_ROLE = Role.USER

# Roles with admin panel access.
ADMIN_ROLES: tuple[Role, ...] = (
    Role.SUPER_ADMIN,
    Role.ADMIN,
    Role.PROGRAMME,
    Role.TREASURY,
    Role.SECRETARIAT,
)

_ROLES_BY_VALUE = {role.value: role for role in Role}


def parse_role(value: Any) -> Role | None:
    """Map an arbitrary value onto the closed role set.

    Only exact matches are accepted: ``"Admin"`` or ``" admin"`` are rejected
    the same way as ``None`` or an unknown string.
    """

    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    return _ROLES_BY_VALUE.get(value)


def get_role_config(value: Any) -> RoleConfig:
    role = parse_role(value)
    if role is not None:
        return ROLE_CONFIG[role]
    label = value if isinstance(value, str) and value else "Unknown"
    return RoleConfig(label=label, description="", color=NEUTRAL_COLOR, icon="user", level=0)


def get_role_level(value: Any) -> int:
    role = parse_role(value)
    if role is None:
        return 0
    return ROLE_CONFIG[role].level


def is_admin_role(value: Any) -> bool:
    return parse_role(value) in ADMIN_ROLES
