# backend/mercylink/security.py

"""
Security helpers for the Mercy Link portal.

Responsibilities:
- Password hashing and verification
- Signing and reading the `session` cookie (a short-lived JWT)
- FastAPI dependencies for the current session / admin checks

The session cookie carries the caller's id, email, name and role, so
handlers can authorise a request without a users-table lookup.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from pydantic import BaseModel

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHash
import bcrypt

from mercylink.apps.accounts.models import User, UserRole

# ---------------------------------------------------------------------------
# CONFIG
# ---------------------------------------------------------------------------

# In production, ALWAYS override these via environment variables.
SECRET_KEY = os.getenv("AUTH_SECRET", "mercy-link-secret-key-change-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
SESSION_COOKIE_NAME = "session"

try:
    SESSION_MAX_AGE_HOURS: int = int(os.getenv("SESSION_MAX_AGE_HOURS", "8"))
except ValueError:
    SESSION_MAX_AGE_HOURS = 8

_secure_default = "true" if os.getenv("ENVIRONMENT", "development").lower() == "production" else "false"
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", _secure_default).lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# PASSWORD HASHING
# ---------------------------------------------------------------------------

_pwd_hasher = PasswordHasher(
    time_cost=int(os.getenv("ARGON2_TIME_COST", "3")),
    memory_cost=int(os.getenv("ARGON2_MEMORY_COST", "65536")),  # KiB (64MB)
    parallelism=int(os.getenv("ARGON2_PARALLELISM", "2")),
    hash_len=int(os.getenv("ARGON2_HASH_LEN", "32")),
    salt_len=int(os.getenv("ARGON2_SALT_LEN", "16")),
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if the plain password matches the stored hash."""
    if not plain_password or not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _pwd_hasher.verify(hashed_password, plain_password)
        except (VerifyMismatchError, VerificationError, InvalidHash):
            return False

    # Accounts imported from the previous system carry bcrypt hashes.
    if hashed_password.startswith(("$2a$", "$2b$", "$2y$")):
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False

    return False


def get_password_hash(password: str) -> str:
    """Hash a password for storing in the database (Argon2id)."""
    return _pwd_hasher.hash(password)


# ---------------------------------------------------------------------------
# SESSIONS
# ---------------------------------------------------------------------------


class SessionUser(BaseModel):
    id: str
    email: str
    name: str = ""
    role: UserRole = UserRole.LEAD_STAFF

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(id=user.id, email=user.email, name=user.name, role=user.role)


def encode_session_token(
    session: SessionUser,
    *,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        if expires_delta is not None
        else timedelta(hours=SESSION_MAX_AGE_HOURS)
    )
    claims = {
        "user": session.model_dump(mode="json"),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str) -> Optional[SessionUser]:
    """Return the session carried by `token`, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None

    user = payload.get("user")
    if not isinstance(user, dict):
        return None
    try:
        return SessionUser(**user)
    except ValueError:
        return None


def create_session(response: Response, user: User) -> str:
    """Sign a session for `user` and attach it to the response as a cookie."""
    token = encode_session_token(SessionUser.from_user(user))
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=SESSION_MAX_AGE_HOURS * 60 * 60,
        path="/",
    )
    return token


def delete_session(response: Response) -> None:
    """Clear the session cookie. Safe to call when no session exists."""
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


# ---------------------------------------------------------------------------
# FASTAPI DEPENDENCIES
# ---------------------------------------------------------------------------


def get_session(request: Request) -> Optional[SessionUser]:
    """Resolve the caller from the session cookie; None when unauthenticated."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    return decode_session_token(token)


def require_session(
    session: Optional[SessionUser] = Depends(get_session),
) -> SessionUser:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return session


def require_admin(
    session: SessionUser = Depends(require_session),
) -> SessionUser:
    if session.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    return session
