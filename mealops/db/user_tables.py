"""User accounts table."""
from __future__ import annotations

from sqlalchemy import Column, String, DateTime, Enum as SAEnum

from mealops.db.tables import Base, _now, _uuid
from mealops.models import Role


class UserRow(Base):
    """Email + password account with a USER/ADMIN role."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(256), nullable=False)  # PBKDF2-SHA256
    role = Column(SAEnum(Role, name="user_role"), nullable=False, default=Role.USER, index=True)
    created_at = Column(DateTime(timezone=True), default=_now)
