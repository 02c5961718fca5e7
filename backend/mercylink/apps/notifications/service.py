from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

from mercylink.apps.accounts import models as account_models
from mercylink.apps.compliance import models as compliance_models
from mercylink.apps.staffing import models as staffing_models

from . import models

logger = logging.getLogger(__name__)

DEADLINE_WARNING_DAYS = 7


class NotificationNotFound(Exception):
    """Raised when a notification is missing or owned by another user."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Per-user operations
# ---------------------------------------------------------------------------


def mark_read(db: Session, *, notification_id: str, user_id: str) -> models.Notification:
    """
    Flag a notification as read for its owner.

    Ownership is part of the lookup predicate, so a notification that
    belongs to someone else is indistinguishable from a missing one.
    """
    notification = (
        db.query(models.Notification)
        .filter(
            models.Notification.id == notification_id,
            models.Notification.user_id == user_id,
        )
        .first()
    )
    if notification is None:
        raise NotificationNotFound(notification_id)

    notification.is_read = True
    db.add(notification)
    db.flush()
    return notification


def list_for_user(
    db: Session,
    *,
    user_id: str,
    unread_only: bool = False,
    limit: int = 50,
) -> Sequence[models.Notification]:
    query = db.query(models.Notification).filter(models.Notification.user_id == user_id)
    if unread_only:
        query = query.filter(models.Notification.is_read.is_(False))
    return query.order_by(models.Notification.created_at.desc()).limit(limit).all()


# ---------------------------------------------------------------------------
# Compliance reminder generation (cron)
# ---------------------------------------------------------------------------


def _house_scope(db: Session, user: account_models.User) -> List[str]:
    if user.is_admin:
        return [house_id for (house_id,) in db.query(staffing_models.House.id).all()]
    return [link.house_id for link in user.assigned_houses]


def _items_in_scope(db: Session, house_ids: List[str]):
    employees_in_houses = select(staffing_models.EmployeeHouse.employee_id).where(
        staffing_models.EmployeeHouse.house_id.in_(house_ids)
    )
    return (
        db.query(compliance_models.ComplianceItem)
        .options(
            joinedload(compliance_models.ComplianceItem.employee),
            joinedload(compliance_models.ComplianceItem.house),
        )
        .filter(
            or_(
                compliance_models.ComplianceItem.house_id.in_(house_ids),
                compliance_models.ComplianceItem.employee_id.in_(employees_in_houses),
            )
        )
    )


def _item_link(item: compliance_models.ComplianceItem) -> str:
    if item.employee_id:
        return f"/dashboard/employees/{item.employee_id}"
    return f"/dashboard/houses/{item.house_id}"


def _item_subject(item: compliance_models.ComplianceItem) -> str:
    if item.employee is not None:
        return item.employee.full_name
    if item.house is not None:
        return item.house.name
    return "Unknown"


def _already_notified(
    db: Session,
    *,
    user_id: str,
    kind: models.NotificationType,
    link: str,
    since: datetime,
) -> bool:
    existing = (
        db.query(models.Notification.id)
        .filter(
            models.Notification.user_id == user_id,
            models.Notification.type == kind,
            models.Notification.link == link,
            models.Notification.created_at >= since,
        )
        .first()
    )
    return existing is not None


def _notify_once(
    db: Session,
    *,
    user_id: str,
    kind: models.NotificationType,
    link: str,
    title: str,
    message: str,
    since: datetime,
    now: datetime,
) -> bool:
    if _already_notified(db, user_id=user_id, kind=kind, link=link, since=since):
        return False
    db.add(
        models.Notification(
            user_id=user_id,
            type=kind,
            title=title,
            message=message,
            link=link,
            created_at=now,
        )
    )
    db.flush()
    return True


def _due_label(due: date) -> str:
    return f"{due:%b} {due.day}"


def generate_compliance_notifications(db: Session, *, now: Optional[datetime] = None) -> dict:
    """
    Create OVERDUE and DEADLINE_WARNING notifications for every active user,
    then flip past-due PENDING items to OVERDUE.

    A user gets at most one notification per type and link per day. The
    status flip runs last, so items that fall overdue today are reported
    on the next run. Returns a summary dict for logging/cron visibility.
    """
    now = now or _utcnow()
    today = now.date()
    start_of_day = datetime.combine(today, time.min, tzinfo=timezone.utc)
    warning_horizon = today + timedelta(days=DEADLINE_WARNING_DAYS)

    users = (
        db.query(account_models.User)
        .options(joinedload(account_models.User.assigned_houses))
        .filter(account_models.User.is_active.is_(True))
        .all()
    )

    created = 0
    for user in users:
        house_ids = _house_scope(db, user)
        if not house_ids:
            continue

        overdue_items = (
            _items_in_scope(db, house_ids)
            .filter(compliance_models.ComplianceItem.status == compliance_models.ComplianceStatus.OVERDUE)
            .all()
        )
        for item in overdue_items:
            if _notify_once(
                db,
                user_id=user.id,
                kind=models.NotificationType.OVERDUE,
                link=_item_link(item),
                title="Overdue Compliance Item",
                message=f'"{item.item_name}" for {_item_subject(item)} is overdue',
                since=start_of_day,
                now=now,
            ):
                created += 1

        upcoming_items = (
            _items_in_scope(db, house_ids)
            .filter(
                compliance_models.ComplianceItem.status == compliance_models.ComplianceStatus.PENDING,
                compliance_models.ComplianceItem.due_date >= today,
                compliance_models.ComplianceItem.due_date <= warning_horizon,
            )
            .all()
        )
        for item in upcoming_items:
            days_until_due = (item.due_date - today).days
            plural = "" if days_until_due == 1 else "s"
            if _notify_once(
                db,
                user_id=user.id,
                kind=models.NotificationType.DEADLINE_WARNING,
                link=_item_link(item),
                title=f"Due in {days_until_due} day{plural}",
                message=f'"{item.item_name}" for {_item_subject(item)} is due {_due_label(item.due_date)}',
                since=start_of_day,
                now=now,
            ):
                created += 1

    overdue_marked = (
        db.query(compliance_models.ComplianceItem)
        .filter(
            compliance_models.ComplianceItem.status == compliance_models.ComplianceStatus.PENDING,
            compliance_models.ComplianceItem.due_date < today,
        )
        .update(
            {compliance_models.ComplianceItem.status: compliance_models.ComplianceStatus.OVERDUE},
            synchronize_session=False,
        )
    )

    logger.info(
        "Compliance notifications generated",
        extra={"notifications_created": created, "overdue_marked": overdue_marked},
    )
    return {
        "notifications_created": created,
        "overdue_marked": overdue_marked,
        "timestamp": now.isoformat(),
    }
