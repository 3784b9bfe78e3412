import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from vom_admin.auth.deps import get_current_user
from vom_admin.auth.errors import AuthError
from vom_admin.auth.permissions import get_role_permissions
from vom_admin.auth.roles import get_role_config, is_admin_role
from vom_admin.auth.security import session_max_age
from vom_admin.core.config import settings
from vom_admin.core.db import get_db
from vom_admin.presentation.context import AuthContext
from vom_admin.schemas.auth import (
    LoginRequest,
    LogoutResponse,
    PermissionsResponse,
    RoleBadge,
    SessionResponse,
    SessionUserOut,
)
from vom_admin.services.sessions import SessionUser, create_session, resolve_session, revoke_sessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _serialize_user(user: SessionUser) -> SessionUserOut:
    return SessionUserOut(
        id=user.id,
        uid=user.uid,
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        display_name=user.display_name,
    )


def _badge(role: str | None) -> RoleBadge:
    config = get_role_config(role)
    return RoleBadge(key=role or "", label=config.label, color=config.color)


@router.post("/login", response_model=SessionResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> SessionResponse:
    user, token = create_session(db, payload.email, payload.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(session_max_age().total_seconds()),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    return SessionResponse(message="Login successful", user=_serialize_user(user))


@router.post("/logout", response_model=LogoutResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> LogoutResponse:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        try:
            user = resolve_session(db, token)
        except AuthError as exc:
            logger.warning("session_revoke_skipped", extra={"reason": exc.detail})
        else:
            revoke_sessions(db, user.uid)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return LogoutResponse()


@router.get("/session", response_model=SessionResponse)
def session(user: SessionUser = Depends(get_current_user)) -> SessionResponse:
    return SessionResponse(user=_serialize_user(user))


@router.get("/permissions", response_model=PermissionsResponse)
def permissions(
    view_as: str | None = Query(default=None, description="Preview another role (super admins only)"),
    user: SessionUser = Depends(get_current_user),
) -> PermissionsResponse:
    """Permission map for rendering navigation; not an authorization decision."""

    context = AuthContext.resolved(user)
    if view_as:
        try:
            context = context.with_viewing_as(view_as)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    effective = context.effective_role
    granted = get_role_permissions(effective)
    return PermissionsResponse(
        role=_badge(user.role),
        effective_role=_badge(effective),
        viewing_as=context.viewing_as.role.value if context.viewing_as else None,
        is_admin=is_admin_role(effective),
        permissions={
            resource.value: sorted(action.value for action in actions)
            for resource, actions in granted.items()
        },
    )
