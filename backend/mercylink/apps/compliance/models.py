from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from mercylink.database import Base
from mercylink.utils.identifiers import generate_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ComplianceStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    NOT_COMPLETED = "NOT_COMPLETED"


class ComplianceEntityType(str, enum.Enum):
    EMPLOYEE = "EMPLOYEE"
    HOUSE = "HOUSE"


class ComplianceItem(Base):
    """
    A dated regulatory obligation (training, review, plan) for an employee
    or a house.

    `completed_date` is written together with status COMPLETED by the
    completion endpoints and cleared when a completion is undone.
    """

    __tablename__ = "compliance_items"
    __table_args__ = (
        Index("ix_compliance_items_status_due", "status", "due_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    entity_type = Column(
        Enum(ComplianceEntityType, name="compliance_entity_type_enum", native_enum=False),
        nullable=False,
        default=ComplianceEntityType.EMPLOYEE,
    )
    item_type = Column(String(64), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    statute_ref = Column(String(128), nullable=True)

    due_date = Column(Date, nullable=True, index=True)
    completed_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(ComplianceStatus, name="compliance_status_enum", native_enum=False),
        nullable=False,
        default=ComplianceStatus.PENDING,
        index=True,
    )

    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=True, index=True)
    house_id = Column(String(36), ForeignKey("houses.id", ondelete="CASCADE"), nullable=True, index=True)

    corrective_action = Column(Text, nullable=True)
    corrective_notes = Column(Text, nullable=True)
    correction_due_date = Column(Date, nullable=True)
    correction_completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    employee = relationship("Employee")
    house = relationship("House")

    def __repr__(self) -> str:
        return f"<ComplianceItem id={self.id} name={self.item_name} status={self.status}>"
