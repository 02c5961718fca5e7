from __future__ import annotations

from create_initial_admin import ensure_admin
from mercylink.apps.accounts import models as account_models
from mercylink.security import verify_password


def test_ensure_admin_creates_once(db_session):
    admin, created = ensure_admin(db_session, email=" Ops@MercyLink.org ", password="first-pass")
    again, created_again = ensure_admin(db_session, email="ops@mercylink.org", password="other-pass")

    assert created is True
    assert created_again is False
    assert again.id == admin.id
    assert admin.email == "ops@mercylink.org"
    assert admin.role == account_models.UserRole.ADMIN
    assert verify_password("first-pass", again.hashed_password)
    assert db_session.query(account_models.User).count() == 1
