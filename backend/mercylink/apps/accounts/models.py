# backend/mercylink/apps/accounts/models.py

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from mercylink.database import Base
from mercylink.utils.identifiers import generate_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    """Portal roles. ADMIN sees every house; the others are house-scoped."""

    ADMIN = "ADMIN"
    DESIGNATED_COORDINATOR = "DESIGNATED_COORDINATOR"
    LEAD_STAFF = "LEAD_STAFF"


class User(Base):
    """
    Portal login account (office staff, coordinators, lead staff).

    Direct-care employees without a login live in `staffing.Employee`.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role_enum", native_enum=False),
        nullable=False,
        default=UserRole.LEAD_STAFF,
    )
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    assigned_houses = relationship(
        "UserHouse",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"


class UserHouse(Base):
    """House scope for non-admin users."""

    __tablename__ = "user_houses"
    __table_args__ = (
        UniqueConstraint("user_id", "house_id", name="uq_user_houses_user_house"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    house_id = Column(String(36), ForeignKey("houses.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", back_populates="assigned_houses")
    house = relationship("House")
