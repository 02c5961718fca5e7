from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mercylink.database import get_db
from mercylink.security import SessionUser, require_session

from . import models, schemas, services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compliance", tags=["compliance"])


def _apply_transition(
    db: Session,
    transition: Callable[[], models.ComplianceItem],
    *,
    log_message: str,
) -> schemas.ComplianceItemEnvelope:
    """Run one status transition in its own commit and map service errors to HTTP."""
    try:
        item = transition()
        db.commit()
        db.refresh(item)
    except services.ComplianceItemNotFound:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    except services.InvalidStatusTransition as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception:
        db.rollback()
        logger.exception(log_message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update item",
        )
    return schemas.ComplianceItemEnvelope(item=schemas.ComplianceItemRead.model_validate(item))


@router.post("/{item_id}/complete", response_model=schemas.ComplianceItemEnvelope)
def complete_compliance_item(
    item_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_session),
):
    return _apply_transition(
        db,
        lambda: services.complete_item(db, item_id=item_id, actor_id=session.id),
        log_message="Error marking item complete",
    )


@router.post("/{item_id}/undo-complete", response_model=schemas.ComplianceItemEnvelope)
def undo_complete_compliance_item(
    item_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_session),
):
    return _apply_transition(
        db,
        lambda: services.undo_completion(db, item_id=item_id, actor_id=session.id),
        log_message="Error undoing completion",
    )


@router.post("/{item_id}/not-completed", response_model=schemas.ComplianceItemEnvelope)
def mark_compliance_item_not_completed(
    item_id: str,
    payload: schemas.NotCompletedRequest,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_session),
):
    return _apply_transition(
        db,
        lambda: services.mark_not_completed(
            db,
            item_id=item_id,
            actor_id=session.id,
            corrective_action=payload.corrective_action or "",
            corrective_notes=payload.corrective_notes,
            correction_due_date=payload.correction_due_date,
        ),
        log_message="Error marking item not completed",
    )


@router.post("/{item_id}/correction-complete", response_model=schemas.ComplianceItemEnvelope)
def complete_compliance_item_correction(
    item_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_session),
):
    return _apply_transition(
        db,
        lambda: services.complete_correction(db, item_id=item_id, actor_id=session.id),
        log_message="Error completing correction",
    )
