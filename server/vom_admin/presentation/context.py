from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from vom_admin.auth.errors import AuthorizationDenied
from vom_admin.auth.permissions import has_any_permission, has_permission
from vom_admin.auth.roles import Action, Resource, Role, parse_role
from vom_admin.services.sessions import SessionUser


@dataclass(frozen=True)
class ViewAsOverride:
    """A super admin previewing the panel as a lower role."""

    role: Role

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role) or self.role is Role.SUPER_ADMIN:
            raise ValueError("View-as role must be a registered role other than super_admin")


@dataclass(frozen=True)
class AuthContext:
    user: SessionUser | None = None
    loading: bool = False
    viewing_as: ViewAsOverride | None = None

    @classmethod
    def loading_context(cls) -> "AuthContext":
        return cls(user=None, loading=True)

    @classmethod
    def resolved(cls, user: SessionUser | None) -> "AuthContext":
        return cls(user=user, loading=False)

    @property
    def is_super_admin(self) -> bool:
        return self.user is not None and parse_role(self.user.role) is Role.SUPER_ADMIN

    @property
    def effective_role(self) -> str | None:
        if self.user is None:
            return None
        if self.viewing_as is not None and self.is_super_admin:
            return self.viewing_as.role.value
        return self.user.role

    def with_viewing_as(self, role: Any) -> "AuthContext":
        """Return a copy previewing ``role``; None or super_admin resets the preview."""

        if not self.is_super_admin:
            raise AuthorizationDenied(
                "Only super admins can view the panel as another role",
                role=self.user.role if self.user else None,
            )
        if role is None:
            return replace(self, viewing_as=None)
        parsed = parse_role(role)
        if parsed is None:
            raise ValueError(f"Unknown role: {role}")
        if parsed is Role.SUPER_ADMIN:
            return replace(self, viewing_as=None)
        return replace(self, viewing_as=ViewAsOverride(parsed))

    def can(self, resource: Resource | str, action: Action | str) -> bool:
        if self.loading:
            return False
        return has_permission(self.effective_role, resource, action)

    def can_see(self, resource: Resource | str) -> bool:
        if self.loading:
            return False
        return has_any_permission(self.effective_role, resource)
