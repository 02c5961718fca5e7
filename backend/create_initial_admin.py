# backend/create_initial_admin.py
"""Bootstrap the first ADMIN login for a fresh database.

    INITIAL_ADMIN_EMAIL=ops@mercylink.org INITIAL_ADMIN_PASSWORD=... \
        python create_initial_admin.py
"""

import os

from mercylink import models  # noqa: F401
from mercylink.apps.accounts.models import User, UserRole
from mercylink.apps.accounts.services import get_user_by_email
from mercylink.database import SessionLocal
from mercylink.security import get_password_hash

DEFAULT_EMAIL = "admin@mercylink.local"
DEFAULT_PASSWORD = "ChangeMe123!"


def ensure_admin(db, *, email: str, password: str, name: str = "Portal Admin") -> tuple:
    """Return `(user, created)`; an existing account with that email is left untouched."""
    existing = get_user_by_email(db, email)
    if existing is not None:
        return existing, False

    admin = User(
        email=email.strip().lower(),
        name=name,
        role=UserRole.ADMIN,
        is_active=True,
        hashed_password=get_password_hash(password),
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True


def main() -> None:
    email = os.getenv("INITIAL_ADMIN_EMAIL", DEFAULT_EMAIL)
    password = os.getenv("INITIAL_ADMIN_PASSWORD", DEFAULT_PASSWORD)
    name = os.getenv("INITIAL_ADMIN_NAME", "Portal Admin")
    if password == DEFAULT_PASSWORD:
        print("[WARN] INITIAL_ADMIN_PASSWORD not set; using the default password. Change it after first login.")

    db = SessionLocal()
    try:
        admin, created = ensure_admin(db, email=email, password=password, name=name)
        if not created:
            print(f"[INFO] Admin already exists: id={admin.id}, email={admin.email}, role={admin.role.value}")
            return
        print(f"[OK] Created admin {admin.email} (id={admin.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
