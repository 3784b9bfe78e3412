"""Presentation-side helpers: the auth context handed to views and the permission guard.

Nothing here makes an authorization decision; the view-as preview only changes
what a client renders.
"""

from vom_admin.presentation.context import AuthContext, ViewAsOverride  # noqa: F401
from vom_admin.presentation.guard import DeniedView, GuardRender, GuardState, PermissionGuard  # noqa: F401
