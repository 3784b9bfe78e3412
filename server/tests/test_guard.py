from __future__ import annotations

import pytest

from vom_admin.auth.errors import AuthorizationDenied
from vom_admin.auth.roles import Action, Resource, Role
from vom_admin.presentation import AuthContext, GuardState, PermissionGuard, ViewAsOverride
from vom_admin.services.sessions import SessionUser


def _user(role: str, uid: str = "uid-1") -> SessionUser:
    return SessionUser(id=1, uid=uid, email=f"{role}@example.com", role=role, first_name="Test", last_name="User")


def test_loading_guard_renders_neither_branch() -> None:
    guard = PermissionGuard(Resource.MEMBERS, Action.VIEW, fallback="no access")
    assert guard.resolve(AuthContext.loading_context()) is GuardState.LOADING

    rendered = guard.render("protected")
    assert rendered.state is GuardState.LOADING
    assert rendered.content is None
    assert rendered.denied is None


def test_guard_allows_when_role_has_permission() -> None:
    guard = PermissionGuard(Resource.MEMBERS, Action.EXPORT)
    guard.resolve(AuthContext.resolved(_user("admin")))

    rendered = guard.render("protected")
    assert rendered.state is GuardState.ALLOWED
    assert rendered.content == "protected"


def test_guard_denial_view_names_action_resource_and_role() -> None:
    guard = PermissionGuard(Resource.MEMBERS, Action.EXPORT)
    guard.resolve(AuthContext.resolved(_user("programme")))

    rendered = guard.render("protected")
    assert rendered.state is GuardState.DENIED
    assert rendered.content is None
    denied = rendered.denied
    assert denied is not None
    assert denied.action == "export"
    assert denied.resource == "members"
    assert denied.role_label == "Programme"
    assert denied.role_color == "#7C3AED"
    assert "export members" in denied.message
    assert "administrator" in denied.contact_hint


def test_guard_uses_fallback_when_given() -> None:
    guard = PermissionGuard(Resource.ROLES, Action.ASSIGN, fallback="ask a super admin")
    guard.resolve(AuthContext.resolved(_user("admin")))
    rendered = guard.render("protected")
    assert rendered.state is GuardState.DENIED
    assert rendered.content == "ask a super admin"
    assert rendered.denied is None


def test_guard_denies_when_no_session() -> None:
    guard = PermissionGuard(Resource.MEMBERS, Action.VIEW)
    guard.resolve(AuthContext.resolved(None))
    rendered = guard.render("protected")
    assert rendered.state is GuardState.DENIED
    assert rendered.denied.role is None
    assert rendered.denied.role_label is None


def test_guard_state_is_terminal_until_remount() -> None:
    guard = PermissionGuard(Resource.SETTINGS, Action.EDIT)
    guard.resolve(AuthContext.resolved(_user("treasury")))
    assert guard.state is GuardState.DENIED

    assert guard.resolve(AuthContext.resolved(_user("admin"))) is GuardState.DENIED
    assert guard.resolve(AuthContext.loading_context()) is GuardState.DENIED

    guard.remount()
    assert guard.state is GuardState.LOADING
    assert guard.resolve(AuthContext.resolved(_user("admin"))) is GuardState.ALLOWED


def test_super_admin_can_view_as_lower_role() -> None:
    context = AuthContext.resolved(_user("super_admin")).with_viewing_as("programme")
    assert context.effective_role == "programme"
    assert context.user.role == "super_admin"

    guard = PermissionGuard(Resource.MEMBERS, Action.DELETE)
    guard.resolve(context)
    rendered = guard.render("protected")
    assert rendered.state is GuardState.DENIED
    assert rendered.denied.role_label == "Programme"


def test_view_as_reset() -> None:
    context = AuthContext.resolved(_user("super_admin")).with_viewing_as("user")
    assert context.effective_role == "user"
    assert context.with_viewing_as(None).effective_role == "super_admin"
    assert context.with_viewing_as("super_admin").viewing_as is None


def test_view_as_is_super_admin_only() -> None:
    with pytest.raises(AuthorizationDenied):
        AuthContext.resolved(_user("admin")).with_viewing_as("user")
    with pytest.raises(AuthorizationDenied):
        AuthContext.resolved(None).with_viewing_as("user")


def test_view_as_rejects_unknown_role() -> None:
    with pytest.raises(ValueError):
        AuthContext.resolved(_user("super_admin")).with_viewing_as("pastor")


def test_override_ignored_for_non_super_admin_context() -> None:
    context = AuthContext(user=_user("programme"), viewing_as=ViewAsOverride(Role.ADMIN))
    assert context.effective_role == "programme"
    assert context.can(Resource.MEMBERS, Action.DELETE) is False


def test_override_cannot_target_super_admin() -> None:
    with pytest.raises(ValueError):
        ViewAsOverride(Role.SUPER_ADMIN)


def test_session_user_has_no_view_as_field() -> None:
    assert not hasattr(_user("super_admin"), "viewing_as")


def test_context_helpers_deny_while_loading() -> None:
    context = AuthContext(user=_user("admin"), loading=True)
    assert context.can(Resource.MEMBERS, Action.VIEW) is False
    assert context.can_see(Resource.MEMBERS) is False
    assert AuthContext.resolved(_user("admin")).can_see(Resource.MEMBERS) is True
