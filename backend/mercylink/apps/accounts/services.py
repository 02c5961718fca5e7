# backend/mercylink/apps/accounts/services.py

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from mercylink.apps.audit import services as audit_services
from mercylink.security import SessionUser, verify_password

from . import models

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when login credentials are invalid or the account is disabled."""


def _normalise_email(value: str) -> str:
    return (value or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return (
        db.query(models.User)
        .filter(models.User.email == _normalise_email(email))
        .first()
    )


def authenticate_user(
    db: Session,
    *,
    email: str,
    password: str,
    ip: Optional[str] = None,
) -> models.User:
    """
    Check credentials and record the LOGIN audit row.

    Unknown email and wrong password raise the same error so callers
    cannot probe which accounts exist.
    """
    user = get_user_by_email(db, email)
    if user is None or not user.is_active or not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid email or password")

    audit_services.record_audit_event(
        db,
        user_id=user.id,
        action="LOGIN",
        entity_type="USER",
        entity_id=user.id,
        details={"email": user.email},
        ip_address=ip,
    )
    return user


def record_logout(
    db: Session,
    session: SessionUser,
    *,
    ip: Optional[str] = None,
) -> None:
    audit_services.record_audit_event(
        db,
        user_id=session.id,
        action="LOGOUT",
        entity_type="USER",
        entity_id=session.id,
        details={"email": session.email},
        ip_address=ip,
    )
