from __future__ import annotations

from mercylink.apps.accounts import models as account_models
from mercylink.apps.notifications import models as notification_models
from mercylink.apps.notifications import service as notification_service


def _create_user(db, email: str) -> account_models.User:
    user = account_models.User(
        email=email,
        name=email.split("@")[0].title(),
        role=account_models.UserRole.LEAD_STAFF,
        hashed_password="hash",
    )
    db.add(user)
    db.commit()
    return user


def _create_notification(db, user, *, is_read: bool = False) -> notification_models.Notification:
    notification = notification_models.Notification(
        user_id=user.id,
        type=notification_models.NotificationType.GENERAL,
        title="Reminder",
        message="Check the medication log",
        is_read=is_read,
    )
    db.add(notification)
    db.commit()
    return notification


def test_mark_read_sets_flag_for_owner(client, db_session, login_as):
    user = _create_user(db_session, "owner@example.com")
    notification = _create_notification(db_session, user)
    login_as(user)

    response = client.post(f"/notifications/{notification.id}/read")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    db_session.refresh(notification)
    assert notification.is_read is True


def test_mark_read_is_idempotent(client, db_session, login_as):
    user = _create_user(db_session, "owner@example.com")
    notification = _create_notification(db_session, user, is_read=True)
    login_as(user)

    response = client.post(f"/notifications/{notification.id}/read")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    db_session.refresh(notification)
    assert notification.is_read is True


def test_mark_read_on_someone_elses_notification_is_not_found(client, db_session, login_as):
    owner = _create_user(db_session, "owner@example.com")
    intruder = _create_user(db_session, "intruder@example.com")
    notification = _create_notification(db_session, owner)
    login_as(intruder)

    response = client.post(f"/notifications/{notification.id}/read")

    assert response.status_code == 404
    assert response.json() == {"error": "Notification not found"}
    db_session.refresh(notification)
    assert notification.is_read is False


def test_mark_read_unknown_id_is_not_found(client, db_session, login_as):
    login_as(_create_user(db_session, "owner@example.com"))

    response = client.post("/notifications/missing/read")

    assert response.status_code == 404


def test_mark_read_requires_session(client, db_session):
    user = _create_user(db_session, "owner@example.com")
    notification = _create_notification(db_session, user)

    response = client.post(f"/notifications/{notification.id}/read")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    db_session.refresh(notification)
    assert notification.is_read is False


def test_mark_read_failure_returns_500(client, db_session, login_as, monkeypatch):
    user = _create_user(db_session, "owner@example.com")
    notification = _create_notification(db_session, user)
    login_as(user)

    def _boom(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(notification_service, "mark_read", _boom)

    response = client.post(f"/notifications/{notification.id}/read")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to update notification"}


def test_list_notifications_returns_only_own(client, db_session, login_as):
    owner = _create_user(db_session, "owner@example.com")
    other = _create_user(db_session, "other@example.com")
    mine = _create_notification(db_session, owner)
    _create_notification(db_session, other)
    _create_notification(db_session, owner, is_read=True)
    login_as(owner)

    response = client.get("/notifications", params={"unread_only": True})

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [mine.id]


def test_read_schemas_load_from_orm_objects(db_session):
    from mercylink.apps.accounts import schemas as account_schemas
    from mercylink.apps.audit import schemas as audit_schemas
    from mercylink.apps.compliance import schemas as compliance_schemas
    from mercylink.apps.notifications import schemas as notification_schemas

    for schema in (
        account_schemas.UserRead,
        audit_schemas.AuditUserRead,
        audit_schemas.AuditLogRead,
        compliance_schemas.ComplianceItemRead,
        notification_schemas.NotificationRead,
    ):
        assert schema.model_config.get("from_attributes") is True
        assert "Config" not in vars(schema)

    user = _create_user(db_session, "owner@example.com")
    notification = _create_notification(db_session, user)

    loaded = notification_schemas.NotificationRead.model_validate(notification)

    assert loaded.id == notification.id
    assert loaded.type == notification_models.NotificationType.GENERAL
