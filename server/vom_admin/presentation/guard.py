"""Permission guard for protected views.

The guard starts in ``LOADING`` and settles on ``ALLOWED`` or ``DENIED`` once
the session is known. It never shows protected content while loading and only
returns to ``LOADING`` when the view is remounted after a route change.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from vom_admin.auth.roles import Action, Resource, get_role_config
from vom_admin.presentation.context import AuthContext

CONTACT_ADMIN_HINT = (
    "Contact your system administrator or super admin to request the appropriate role for this section."
)


class GuardState(str, enum.Enum):
    LOADING = "loading"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass(frozen=True)
class DeniedView:
    action: str
    resource: str
    role: str | None
    role_label: str | None
    role_color: str | None
    message: str
    contact_hint: str = CONTACT_ADMIN_HINT


@dataclass(frozen=True)
class GuardRender:
    state: GuardState
    content: Any = None
    denied: DeniedView | None = None


class PermissionGuard:
    def __init__(self, resource: Resource, action: Action, fallback: Any = None) -> None:
        self.resource = resource
        self.action = action
        self.fallback = fallback
        self.state = GuardState.LOADING
        self._role: str | None = None

    def resolve(self, context: AuthContext) -> GuardState:
        if self.state is not GuardState.LOADING or context.loading:
            return self.state
        self._role = context.effective_role
        self.state = GuardState.ALLOWED if context.can(self.resource, self.action) else GuardState.DENIED
        return self.state

    def remount(self) -> None:
        self.state = GuardState.LOADING
        self._role = None

    def render(self, content: Any) -> GuardRender:
        if self.state is GuardState.ALLOWED:
            return GuardRender(state=self.state, content=content)
        if self.state is GuardState.DENIED:
            if self.fallback is not None:
                return GuardRender(state=self.state, content=self.fallback)
            return GuardRender(state=self.state, denied=self._denied_view())
        return GuardRender(state=GuardState.LOADING)

    def _denied_view(self) -> DeniedView:
        config = get_role_config(self._role) if self._role else None
        return DeniedView(
            action=self.action.value,
            resource=self.resource.value,
            role=self._role,
            role_label=config.label if config else None,
            role_color=config.color if config else None,
            message=(
                f"You don't have permission to {self.action.value} {self.resource.value}. "
                "This page requires elevated access that your current role does not provide."
            ),
        )
