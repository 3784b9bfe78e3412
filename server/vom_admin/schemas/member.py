from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class MemberBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)


class MemberCreate(MemberBase):
    pass


class MemberUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=120)
    last_name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    status: str | None = None


class MemberOut(BaseModel):
    id: int
    uid: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    role: str
    status: str
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MemberListResponse(BaseModel):
    items: list[MemberOut]
    total: int
    page: int
    page_size: int
