from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionUserOut(BaseModel):
    id: int
    uid: str
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    success: bool = True
    message: str | None = None
    user: SessionUserOut


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logout successful"


class RoleBadge(BaseModel):
    key: str
    label: str
    color: str


class PermissionsResponse(BaseModel):
    role: RoleBadge
    effective_role: RoleBadge
    viewing_as: str | None = None
    is_admin: bool
    permissions: dict[str, list[str]]
