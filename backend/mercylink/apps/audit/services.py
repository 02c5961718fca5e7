from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date, datetime, time
from typing import Any, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from . import models

logger = logging.getLogger(__name__)

CSV_HEADER = ["Timestamp", "User", "Action", "Entity Type", "Entity ID", "Details", "IP Address"]


def _serialise_details(details: Any) -> Optional[str]:
    """Normalise detail payloads to a string for persistence."""
    if details is None:
        return None
    if isinstance(details, (dict, list)):
        return json.dumps(details)
    return str(details)


def record_audit_event(
    db: Session,
    *,
    user_id: str,
    action: str,
    entity_type: str,
    entity_id: str,
    details: Any = None,
    ip_address: Optional[str] = None,
) -> models.AuditLog:
    """
    Append one audit row in the caller's transaction.

    The caller commits; a failure here propagates so the surrounding
    mutation is rolled back with it.
    """
    entry = models.AuditLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=_serialise_details(details),
        ip_address=ip_address,
    )
    db.add(entry)
    db.flush()
    return entry


def _filtered_query(
    db: Session,
    *,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    user_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
):
    query = db.query(models.AuditLog)
    if action:
        query = query.filter(models.AuditLog.action == action)
    if entity_type:
        query = query.filter(models.AuditLog.entity_type == entity_type)
    if user_id:
        query = query.filter(models.AuditLog.user_id == user_id)
    if start_date:
        query = query.filter(models.AuditLog.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        # end date is inclusive through the last microsecond of the day
        query = query.filter(models.AuditLog.created_at <= datetime.combine(end_date, time.max))
    if search:
        # literal substring match; % and _ in the search text are not wildcards
        query = query.filter(
            or_(
                models.AuditLog.details.icontains(search, autoescape=True),
                models.AuditLog.entity_id.icontains(search, autoescape=True),
            )
        )
    return query


def list_audit_logs(
    db: Session,
    *,
    page: int = 1,
    limit: int = 50,
    **filters: Any,
) -> Tuple[Sequence[models.AuditLog], int]:
    """Return one page of audit rows (newest first) and the total match count."""
    query = _filtered_query(db, **filters)
    total = query.count()
    rows = (
        query.options(joinedload(models.AuditLog.user))
        .order_by(models.AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def export_audit_logs_csv(db: Session, **filters: Any) -> str:
    """Render every matching audit row as CSV, newest first."""
    rows = (
        _filtered_query(db, **filters)
        .options(joinedload(models.AuditLog.user))
        .order_by(models.AuditLog.created_at.desc())
        .all()
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(
            [
                row.created_at.isoformat() if row.created_at else "",
                row.user.name if row.user else "",
                row.action,
                row.entity_type,
                row.entity_id,
                row.details or "",
                row.ip_address or "",
            ]
        )
    logger.info("Exported %d audit log rows", len(rows))
    return buffer.getvalue()
