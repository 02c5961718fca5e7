from __future__ import annotations

import hmac
import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from mercylink.apps.accounts.schemas import SuccessResponse
from mercylink.database import get_db, get_read_db
from mercylink.security import SessionUser, require_session

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _require_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Guard the generator with CRON_SECRET when one is configured."""
    secret = os.getenv("CRON_SECRET")
    if not secret:
        return
    expected = f"Bearer {secret}".encode("utf-8")
    # compare bytes: compare_digest rejects non-ASCII str arguments
    if not hmac.compare_digest((authorization or "").encode("utf-8"), expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.get("", response_model=List[schemas.NotificationRead])
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_read_db),
    session: SessionUser = Depends(require_session),
):
    return service.list_for_user(db, user_id=session.id, unread_only=unread_only, limit=limit)


@router.get(
    "/generate",
    response_model=schemas.GenerateResult,
    dependencies=[Depends(_require_cron_secret)],
)
def generate_notifications(db: Session = Depends(get_db)):
    try:
        summary = service.generate_compliance_notifications(db)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error generating notifications")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate notifications",
        )
    return schemas.GenerateResult(**summary)


@router.post("/{notification_id}/read", response_model=SuccessResponse)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_session),
):
    try:
        service.mark_read(db, notification_id=notification_id, user_id=session.id)
        db.commit()
    except service.NotificationNotFound:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    except Exception:
        db.rollback()
        logger.exception("Error marking notification as read")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update notification",
        )
    return SuccessResponse()
