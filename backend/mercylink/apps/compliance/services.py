from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from mercylink.apps.audit import services as audit_services

from . import models

logger = logging.getLogger(__name__)

AUDIT_ACTION = "STATUS_CHANGE"
AUDIT_ENTITY_TYPE = "COMPLIANCE_ITEM"


class ComplianceItemNotFound(Exception):
    """Raised when the requested compliance item does not exist."""


class InvalidStatusTransition(Exception):
    """Raised when an item is not in the status a transition requires."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_item(db: Session, item_id: str) -> models.ComplianceItem:
    item = db.query(models.ComplianceItem).filter(models.ComplianceItem.id == item_id).first()
    if item is None:
        raise ComplianceItemNotFound(item_id)
    return item


def _audit_status_change(
    db: Session,
    *,
    actor_id: str,
    item: models.ComplianceItem,
    previous_status: models.ComplianceStatus,
    new_status: models.ComplianceStatus,
    **extra: Any,
) -> None:
    details = {
        "itemName": item.item_name,
        "previousStatus": previous_status.value,
        "newStatus": new_status.value,
    }
    details.update(extra)
    audit_services.record_audit_event(
        db,
        user_id=actor_id,
        action=AUDIT_ACTION,
        entity_type=AUDIT_ENTITY_TYPE,
        entity_id=item.id,
        details=details,
    )


def complete_item(
    db: Session,
    *,
    item_id: str,
    actor_id: str,
    now: Optional[datetime] = None,
) -> models.ComplianceItem:
    """
    Mark an item COMPLETED and stamp the completion time.

    No guard on the prior status: completing an already completed item
    stamps a new completion time and appends another audit row.
    """
    item = get_item(db, item_id)
    previous_status = item.status

    item.status = models.ComplianceStatus.COMPLETED
    item.completed_date = now or _utcnow()
    db.add(item)
    db.flush()

    _audit_status_change(
        db,
        actor_id=actor_id,
        item=item,
        previous_status=previous_status,
        new_status=models.ComplianceStatus.COMPLETED,
    )
    return item


def undo_completion(db: Session, *, item_id: str, actor_id: str) -> models.ComplianceItem:
    item = get_item(db, item_id)
    if item.status != models.ComplianceStatus.COMPLETED:
        raise InvalidStatusTransition("Item is not completed")

    item.status = models.ComplianceStatus.PENDING
    item.completed_date = None
    db.add(item)
    db.flush()

    _audit_status_change(
        db,
        actor_id=actor_id,
        item=item,
        previous_status=models.ComplianceStatus.COMPLETED,
        new_status=models.ComplianceStatus.PENDING,
    )
    return item


def mark_not_completed(
    db: Session,
    *,
    item_id: str,
    actor_id: str,
    corrective_action: str,
    corrective_notes: Optional[str] = None,
    correction_due_date: Optional[date] = None,
) -> models.ComplianceItem:
    """Record a missed item together with the corrective action plan."""
    if not (corrective_action or "").strip():
        raise InvalidStatusTransition("Corrective action is required")

    item = get_item(db, item_id)
    previous_status = item.status

    item.status = models.ComplianceStatus.NOT_COMPLETED
    item.corrective_action = corrective_action
    item.corrective_notes = corrective_notes or None
    item.correction_due_date = correction_due_date
    item.correction_completed = False
    db.add(item)
    db.flush()

    _audit_status_change(
        db,
        actor_id=actor_id,
        item=item,
        previous_status=previous_status,
        new_status=models.ComplianceStatus.NOT_COMPLETED,
        correctiveAction=corrective_action,
        correctionDueDate=correction_due_date.isoformat() if correction_due_date else None,
    )
    return item


def complete_correction(
    db: Session,
    *,
    item_id: str,
    actor_id: str,
    now: Optional[datetime] = None,
) -> models.ComplianceItem:
    item = get_item(db, item_id)
    if item.status != models.ComplianceStatus.NOT_COMPLETED:
        raise InvalidStatusTransition("Item must have NOT_COMPLETED status")

    item.status = models.ComplianceStatus.COMPLETED
    item.correction_completed = True
    item.completed_date = now or _utcnow()
    db.add(item)
    db.flush()

    _audit_status_change(
        db,
        actor_id=actor_id,
        item=item,
        previous_status=models.ComplianceStatus.NOT_COMPLETED,
        new_status=models.ComplianceStatus.COMPLETED,
        correctionCompleted=True,
    )
    return item
