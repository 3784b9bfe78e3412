"""Permission matrix and evaluator.

The matrix is hand-curated business policy. A resource missing from a role's
entry means the role has no access to it; nothing here defaults to allow.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from vom_admin.auth.errors import AuthenticationAbsent, AuthorizationDenied, PermissionMatrixError
from vom_admin.auth.roles import Action, Permission, Resource, Role, get_role_level, parse_role

logger = logging.getLogger(__name__)

# A super admin may change the role of another super admin. Self-modification
# is rejected separately by the role-assignment operation.
SUPER_ADMIN_MAY_MODIFY_PEERS = True

_CRUD = (Action.VIEW, Action.CREATE, Action.EDIT, Action.DELETE)

_RAW_MATRIX: dict[Role, dict[Resource, tuple[Action, ...]]] = {
    Role.SUPER_ADMIN: {
        Resource.MEMBERS: (*_CRUD, Action.EXPORT),
        Resource.PROGRAMMES: (*_CRUD, Action.PUBLISH),
        Resource.BANDS: _CRUD,
        Resource.DEPARTMENTS: _CRUD,
        Resource.ANNOUNCEMENTS: _CRUD,
        Resource.FIRST_TIMERS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Resource.ROLES: (Action.VIEW, Action.ASSIGN),
        Resource.SETTINGS: (Action.VIEW, Action.EDIT),
        Resource.REPORTS: (Action.VIEW, Action.EXPORT),
    },
    Role.ADMIN: {
        Resource.MEMBERS: (*_CRUD, Action.EXPORT),
        Resource.PROGRAMMES: (*_CRUD, Action.PUBLISH),
        Resource.BANDS: _CRUD,
        Resource.DEPARTMENTS: _CRUD,
        Resource.ANNOUNCEMENTS: _CRUD,
        Resource.FIRST_TIMERS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Resource.SETTINGS: (Action.VIEW, Action.EDIT),
        Resource.REPORTS: (Action.VIEW, Action.EXPORT),
    },
    Role.PROGRAMME: {
        Resource.MEMBERS: (Action.VIEW,),
        Resource.PROGRAMMES: (Action.VIEW, Action.CREATE, Action.EDIT, Action.PUBLISH),
        Resource.BANDS: (Action.VIEW,),
        Resource.DEPARTMENTS: (Action.VIEW,),
        Resource.ANNOUNCEMENTS: (Action.VIEW,),
        Resource.FIRST_TIMERS: (Action.VIEW,),
        Resource.REPORTS: (Action.VIEW,),
    },
    Role.TREASURY: {
        Resource.MEMBERS: (Action.VIEW,),
        Resource.PROGRAMMES: (Action.VIEW,),
        Resource.BANDS: (Action.VIEW,),
        Resource.DEPARTMENTS: (Action.VIEW,),
        Resource.ANNOUNCEMENTS: (Action.VIEW,),
        Resource.FIRST_TIMERS: (Action.VIEW,),
        Resource.REPORTS: (Action.VIEW, Action.EXPORT),
    },
    Role.SECRETARIAT: {
        Resource.MEMBERS: (Action.VIEW, Action.EDIT, Action.EXPORT),
        Resource.PROGRAMMES: (Action.VIEW,),
        Resource.BANDS: (Action.VIEW,),
        Resource.DEPARTMENTS: (Action.VIEW,),
        Resource.ANNOUNCEMENTS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Resource.FIRST_TIMERS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Resource.REPORTS: (Action.VIEW,),
    },
    # Regular members have no admin panel access.
    Role.USER: {},
}

PermissionMatrix = Mapping[Role, Mapping[Resource, frozenset[Action]]]


def validate_matrix(matrix: Mapping[Any, Mapping[Any, Any]]) -> None:
    """Fail fast when a role is missing or an entry uses unknown keys."""

    missing = [role.value for role in Role if role not in matrix]
    if missing:
        raise PermissionMatrixError(f"Permission matrix has no entry for roles: {', '.join(missing)}")
    for role, entry in matrix.items():
        if not isinstance(role, Role):
            raise PermissionMatrixError(f"Permission matrix has an unknown role key: {role!r}")
        for resource, actions in entry.items():
            if not isinstance(resource, Resource):
                raise PermissionMatrixError(f"{role.value}: unknown resource {resource!r}")
            for action in actions:
                if not isinstance(action, Action):
                    raise PermissionMatrixError(f"{role.value}/{resource.value}: unknown action {action!r}")


def _freeze(matrix: dict[Role, dict[Resource, tuple[Action, ...]]]) -> PermissionMatrix:
    return MappingProxyType(
        {
            role: MappingProxyType({resource: frozenset(actions) for resource, actions in entry.items()})
            for role, entry in matrix.items()
        }
    )


validate_matrix(_RAW_MATRIX)
PERMISSIONS: PermissionMatrix = _freeze(_RAW_MATRIX)
_EMPTY: Mapping[Resource, frozenset[Action]] = MappingProxyType({})


PERMISSION_DESCRIPTIONS: Mapping[tuple[Resource, Action], str] = MappingProxyType(
    {
        (Resource.MEMBERS, Action.VIEW): "View member profiles and lists",
        (Resource.MEMBERS, Action.CREATE): "Add new members to the system",
        (Resource.MEMBERS, Action.EDIT): "Edit member information",
        (Resource.MEMBERS, Action.DELETE): "Remove members from the system",
        (Resource.MEMBERS, Action.EXPORT): "Export member data",
        (Resource.PROGRAMMES, Action.VIEW): "View programme schedules",
        (Resource.PROGRAMMES, Action.CREATE): "Create new programmes",
        (Resource.PROGRAMMES, Action.EDIT): "Edit programme details",
        (Resource.PROGRAMMES, Action.DELETE): "Delete programmes",
        (Resource.PROGRAMMES, Action.PUBLISH): "Publish/unpublish programmes",
        (Resource.BANDS, Action.VIEW): "View band information",
        (Resource.BANDS, Action.CREATE): "Create new bands",
        (Resource.BANDS, Action.EDIT): "Edit band details",
        (Resource.BANDS, Action.DELETE): "Delete bands",
        (Resource.DEPARTMENTS, Action.VIEW): "View department information",
        (Resource.DEPARTMENTS, Action.CREATE): "Create new departments",
        (Resource.DEPARTMENTS, Action.EDIT): "Edit department details",
        (Resource.DEPARTMENTS, Action.DELETE): "Delete departments",
        (Resource.ANNOUNCEMENTS, Action.VIEW): "View announcements",
        (Resource.ANNOUNCEMENTS, Action.CREATE): "Create new announcements",
        (Resource.ANNOUNCEMENTS, Action.EDIT): "Edit announcements",
        (Resource.ANNOUNCEMENTS, Action.DELETE): "Delete announcements",
        (Resource.FIRST_TIMERS, Action.VIEW): "View first timers",
        (Resource.FIRST_TIMERS, Action.CREATE): "Add first timers",
        (Resource.FIRST_TIMERS, Action.EDIT): "Edit first timer information",
        (Resource.ROLES, Action.VIEW): "View user roles",
        (Resource.ROLES, Action.ASSIGN): "Assign roles to users",
        (Resource.SETTINGS, Action.VIEW): "View system settings",
        (Resource.SETTINGS, Action.EDIT): "Modify system settings",
        (Resource.REPORTS, Action.VIEW): "View reports and analytics",
        (Resource.REPORTS, Action.EXPORT): "Export reports and data",
    }
)


def _coerce(enum_cls, value: Any):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return None


def get_role_permissions(role: Any) -> Mapping[Resource, frozenset[Action]]:
    parsed = parse_role(role)
    if parsed is None:
        return _EMPTY
    return PERMISSIONS.get(parsed, _EMPTY)


def has_permission(role: Any, resource: Resource | Permission | str, action: Action | str | None = None) -> bool:
    """Return True when ``role`` may perform ``action`` on ``resource``.

    ``resource`` may also be a ``Permission`` pair, in which case ``action`` is
    taken from it. Unknown or missing roles, resources and actions all
    evaluate to False.
    """

    if isinstance(resource, Permission):
        resource, action = resource.resource, resource.action
    resource_key = _coerce(Resource, resource)
    action_key = _coerce(Action, action)
    if resource_key is None or action_key is None:
        return False
    allowed = get_role_permissions(role).get(resource_key)
    if not allowed:
        return False
    return action_key in allowed


def has_any_permission(role: Any, resource: Resource | str) -> bool:
    resource_key = _coerce(Resource, resource)
    if resource_key is None:
        return False
    return bool(get_role_permissions(role).get(resource_key))


def require_permission(role: Any, resource: Resource | Permission | str, action: Action | str | None = None) -> None:
    """Raise instead of returning False, for mutating entry points."""

    if isinstance(resource, Permission):
        resource, action = resource.resource, resource.action
    if has_permission(role, resource, action):
        return
    resource_value = getattr(resource, "value", resource)
    action_value = getattr(action, "value", action)
    parsed = parse_role(role)
    if parsed is None:
        raise AuthenticationAbsent(f"Permission denied: {role or 'unknown'} cannot {action_value} {resource_value}")
    role_value = parsed.value
    logger.info(
        "permission_denied",
        extra={"role": role_value, "resource": resource_value, "action": action_value},
    )
    raise AuthorizationDenied(
        f"Permission denied: {role_value} cannot {action_value} {resource_value}",
        role=role_value,
        resource=resource_value,
        action=action_value,
    )


def can_modify_role(modifier_role: Any, target_role: Any) -> bool:
    """Only super admins may reassign roles."""

    modifier = parse_role(modifier_role)
    if modifier is not Role.SUPER_ADMIN:
        return False
    target = parse_role(target_role)
    if target is Role.SUPER_ADMIN:
        return SUPER_ADMIN_MAY_MODIFY_PEERS
    return get_role_level(modifier) > get_role_level(target)


def get_permission_description(resource: Resource | str, action: Action | str) -> str:
    resource_key = _coerce(Resource, resource)
    action_key = _coerce(Action, action)
    if resource_key is None or action_key is None:
        return ""
    return PERMISSION_DESCRIPTIONS.get((resource_key, action_key), "")


__all__ = [
    "PERMISSIONS",
    "PERMISSION_DESCRIPTIONS",
    "SUPER_ADMIN_MAY_MODIFY_PEERS",
    "can_modify_role",
    "get_permission_description",
    "get_role_level",
    "get_role_permissions",
    "has_any_permission",
    "has_permission",
    "require_permission",
    "validate_matrix",
]
