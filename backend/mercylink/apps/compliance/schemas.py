from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .models import ComplianceEntityType, ComplianceStatus


class ComplianceItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    entity_type: ComplianceEntityType
    item_type: str
    item_name: str
    statute_ref: Optional[str] = None
    due_date: Optional[date] = None
    completed_date: Optional[datetime] = None
    status: ComplianceStatus
    employee_id: Optional[str] = None
    house_id: Optional[str] = None
    corrective_action: Optional[str] = None
    corrective_notes: Optional[str] = None
    correction_due_date: Optional[date] = None
    correction_completed: bool = False
    created_at: datetime
    updated_at: datetime


class ComplianceItemEnvelope(BaseModel):
    item: ComplianceItemRead


class NotCompletedRequest(BaseModel):
    # Optional so a missing value gets the 400 message rather than a 422.
    corrective_action: Optional[str] = None
    corrective_notes: Optional[str] = None
    correction_due_date: Optional[date] = None
