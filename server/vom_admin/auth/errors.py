from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    """Base for authentication and authorization failures raised by the core."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "auth_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict[str, object]:
        return {"detail": self.detail, "code": self.code}


class AuthenticationAbsent(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"

    def __init__(self, detail: str = "Not authenticated") -> None:
        super().__init__(detail)


class AuthorizationDenied(AuthError):
    code = "permission_denied"

    def __init__(self, detail: str, *, role: str | None = None, resource: str | None = None, action: str | None = None) -> None:
        super().__init__(detail)
        self.role = role
        self.resource = resource
        self.action = action

    def to_payload(self) -> dict[str, object]:
        payload = super().to_payload()
        payload.update({"role": self.role, "resource": self.resource, "action": self.action})
        return payload


class PrivilegeEscalationRejected(AuthError):
    code = "privilege_escalation_rejected"

    NOT_SUPER_ADMIN = "not_super_admin"
    SELF_MODIFICATION = "self_modification"
    UNKNOWN_ROLE = "unknown_role"
    TARGET_NOT_MODIFIABLE = "target_not_modifiable"

    def __init__(self, detail: str, *, reason: str) -> None:
        super().__init__(detail)
        self.reason = reason

    def to_payload(self) -> dict[str, object]:
        payload = super().to_payload()
        payload["reason"] = self.reason
        return payload


class PermissionMatrixError(RuntimeError):
    """Raised at import time when the permission table is not total over Role."""
