from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from mercylink.database import Base
from mercylink.utils.identifiers import generate_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class House(Base):
    """A residential site staffed by employees."""

    __tablename__ = "houses"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, unique=True)
    address = Column(String(255), nullable=True)
    city = Column(String(128), nullable=True)
    state = Column(String(32), nullable=True)
    zip_code = Column(String(16), nullable=True)
    capacity = Column(Integer, nullable=True)
    license_number = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    employee_links = relationship(
        "EmployeeHouse",
        back_populates="house",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<House id={self.id} name={self.name}>"


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        Index("ix_employees_status_last_name", "status", "last_name"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(32), nullable=True)
    position = Column(String(128), nullable=True)
    hire_date = Column(Date, nullable=True)
    status = Column(
        Enum(EmployeeStatus, name="employee_status_enum", native_enum=False),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    assigned_houses = relationship(
        "EmployeeHouse",
        back_populates="employee",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Employee id={self.id} name={self.full_name} status={self.status}>"


class EmployeeHouse(Base):
    """Staffing assignment: an employee may work shifts at a house."""

    __tablename__ = "employee_houses"
    __table_args__ = (
        UniqueConstraint("employee_id", "house_id", name="uq_employee_houses_employee_house"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    house_id = Column(String(36), ForeignKey("houses.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    employee = relationship("Employee", back_populates="assigned_houses")
    house = relationship("House", back_populates="employee_links")
