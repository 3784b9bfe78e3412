from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from vom_admin.core.db import Base

MEMBER_STATUSES = ("active", "inactive")


class Member(Base):
    """A church member record; the admin-panel account lives on the same row."""

    __tablename__ = "members"

    id = Column(Integer, primary_key=True)
    uid = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    phone = Column(String(50), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    # Stored as a plain string; values outside the role registry evaluate as deny.
    role = Column(String(32), nullable=False, default="user", server_default="user", index=True)
    status = Column(String(20), nullable=False, default="active", server_default="active")
    session_version = Column(Integer, nullable=False, default=0, server_default="0")
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
