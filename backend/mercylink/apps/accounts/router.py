# backend/mercylink/apps/accounts/router.py

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from mercylink.database import get_db
from mercylink.security import SessionUser, create_session, delete_session, get_session

from . import schemas, services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.post("/login", response_model=schemas.LoginResponse)
def login(
    payload: schemas.LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    if not payload.email or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    try:
        user = services.authenticate_user(
            db,
            email=payload.email,
            password=payload.password,
            ip=_client_ip(request),
        )
        db.commit()
    except services.AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        )
    except Exception:
        db.rollback()
        logger.exception("Login error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during login",
        )

    create_session(response, user)
    return schemas.LoginResponse(user=schemas.UserRead.model_validate(user))


@router.post("/logout", response_model=schemas.SuccessResponse)
def logout(
    request: Request,
    response: Response,
    session: Optional[SessionUser] = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    End the caller's session.

    Succeeds without a session; the LOGOUT audit row is only written when
    there is someone to attribute it to.
    """
    try:
        if session is not None:
            services.record_logout(db, session, ip=_client_ip(request))
            db.commit()
        delete_session(response)
    except Exception:
        db.rollback()
        logger.exception("Logout error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during logout",
        )

    return schemas.SuccessResponse()
