from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vom_admin.auth.errors import AuthenticationAbsent, AuthorizationDenied
from vom_admin.auth.permissions import require_permission
from vom_admin.auth.roles import Action, Permission, Resource, Role, parse_role
from vom_admin.core.config import settings
from vom_admin.core.db import get_db
from vom_admin.services.sessions import SessionUser, resolve_session


def get_current_user(request: Request, db: Session = Depends(get_db)) -> SessionUser:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return resolve_session(db, token)


def require_access(resource: Resource, action: Action) -> Callable[[SessionUser], SessionUser]:
    permission = Permission(resource, action)

    def checker(user: SessionUser = Depends(get_current_user)) -> SessionUser:
        require_permission(user.role, permission)
        return user

    return checker


def require_super_admin(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    role = parse_role(user.role)
    if role is None:
        raise AuthenticationAbsent("Unknown role")
    if role is not Role.SUPER_ADMIN:
        raise AuthorizationDenied("Super Admin privileges required", role=role.value)
    return user
