from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from vom_admin.core.db import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    type = Column(String(64), nullable=False, default="role_assignment")
    action = Column(String(64), nullable=False, default="assign_role")
    actor_uid = Column(String(64), nullable=False, index=True)
    actor_email = Column(String(255), nullable=True)
    actor_name = Column(String(255), nullable=True)
    actor_role = Column(String(32), nullable=True)
    target_member_id = Column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True, index=True)
    target_email = Column(String(255), nullable=True)
    target_name = Column(String(255), nullable=True)
    previous_role = Column(String(32), nullable=True)
    new_role = Column(String(32), nullable=True)
    reason = Column(String(500), nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
