from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from mercylink.database import get_read_db
from mercylink.security import SessionUser, require_admin

from . import schemas, services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=schemas.AuditLogPage)
def list_audit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    user_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    format: Optional[Literal["csv"]] = None,
    db: Session = Depends(get_read_db),
    session: SessionUser = Depends(require_admin),
):
    """Admin-only audit trail with filters, pagination and CSV export."""
    filters = dict(
        action=action,
        entity_type=entity_type,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    try:
        if format == "csv":
            body = services.export_audit_logs_csv(db, **filters)
            filename = f"audit-log-{datetime.now(timezone.utc).date().isoformat()}.csv"
            return Response(
                content=body,
                media_type="text/csv",
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )

        rows, total = services.list_audit_logs(db, page=page, limit=limit, **filters)
    except Exception:
        logger.exception("Error fetching audit logs")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch audit logs",
        )

    return schemas.AuditLogPage(
        audit_logs=[schemas.AuditLogRead.model_validate(row) for row in rows],
        pagination=schemas.Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )
