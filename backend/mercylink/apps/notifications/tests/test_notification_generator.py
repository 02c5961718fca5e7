from __future__ import annotations

from datetime import date, datetime, timezone

from mercylink.apps.accounts import models as account_models
from mercylink.apps.compliance import models as compliance_models
from mercylink.apps.notifications import models as notification_models
from mercylink.apps.notifications import service as notification_service
from mercylink.apps.staffing import models as staffing_models

NOW = datetime(2026, 10, 2, 12, 0, tzinfo=timezone.utc)


def _create_user(db, email, role, *, houses=(), is_active=True) -> account_models.User:
    user = account_models.User(
        email=email,
        name=email.split("@")[0].title(),
        role=role,
        hashed_password="hash",
        is_active=is_active,
    )
    db.add(user)
    db.flush()
    for house in houses:
        db.add(account_models.UserHouse(user_id=user.id, house_id=house.id))
    db.commit()
    return user


def _create_house(db, name) -> staffing_models.House:
    house = staffing_models.House(name=name)
    db.add(house)
    db.commit()
    return house


def _create_employee(db, house) -> staffing_models.Employee:
    employee = staffing_models.Employee(first_name="Erin", last_name="Employee")
    db.add(employee)
    db.flush()
    db.add(staffing_models.EmployeeHouse(employee_id=employee.id, house_id=house.id))
    db.commit()
    return employee


def _create_item(db, name, status, due, *, house=None, employee=None) -> compliance_models.ComplianceItem:
    item = compliance_models.ComplianceItem(
        entity_type=(
            compliance_models.ComplianceEntityType.EMPLOYEE
            if employee is not None
            else compliance_models.ComplianceEntityType.HOUSE
        ),
        item_type="GENERAL",
        item_name=name,
        due_date=due,
        status=status,
        house_id=house.id if house is not None else None,
        employee_id=employee.id if employee is not None else None,
    )
    db.add(item)
    db.commit()
    return item


def _notifications_for(db, user):
    return (
        db.query(notification_models.Notification)
        .filter(notification_models.Notification.user_id == user.id)
        .all()
    )


def test_generate_scopes_notifications_by_house_and_flips_overdue(db_session):
    house_a = _create_house(db_session, "Maple House")
    house_b = _create_house(db_session, "Oak House")
    employee = _create_employee(db_session, house_a)

    admin = _create_user(db_session, "admin@example.com", account_models.UserRole.ADMIN)
    coordinator = _create_user(
        db_session,
        "coordinator@example.com",
        account_models.UserRole.DESIGNATED_COORDINATOR,
        houses=[house_a],
    )
    unscoped = _create_user(db_session, "lead@example.com", account_models.UserRole.LEAD_STAFF)
    retired = _create_user(
        db_session,
        "retired@example.com",
        account_models.UserRole.ADMIN,
        is_active=False,
    )

    Status = compliance_models.ComplianceStatus
    _create_item(db_session, "CPR Certification", Status.OVERDUE, date(2026, 9, 20), employee=employee)
    _create_item(db_session, "Fire Drill", Status.PENDING, date(2026, 10, 5), house=house_a)
    _create_item(db_session, "Water Test", Status.PENDING, date(2026, 10, 3), house=house_b)
    lapsed = _create_item(db_session, "Furnace Inspection", Status.PENDING, date(2026, 9, 30), house=house_b)
    _create_item(db_session, "Annual Review", Status.PENDING, date(2026, 10, 20), house=house_a)
    _create_item(db_session, "License Renewal", Status.COMPLETED, date(2026, 10, 4), house=house_a)

    summary = notification_service.generate_compliance_notifications(db_session, now=NOW)
    db_session.commit()
    db_session.expire_all()

    assert summary["notifications_created"] == 5
    assert summary["overdue_marked"] == 1
    assert summary["timestamp"] == NOW.isoformat()

    admin_rows = {(row.type, row.title, row.message) for row in _notifications_for(db_session, admin)}
    assert admin_rows == {
        (
            notification_models.NotificationType.OVERDUE,
            "Overdue Compliance Item",
            '"CPR Certification" for Erin Employee is overdue',
        ),
        (
            notification_models.NotificationType.DEADLINE_WARNING,
            "Due in 3 days",
            '"Fire Drill" for Maple House is due Oct 5',
        ),
        (
            notification_models.NotificationType.DEADLINE_WARNING,
            "Due in 1 day",
            '"Water Test" for Oak House is due Oct 3',
        ),
    }

    coordinator_links = sorted(row.link for row in _notifications_for(db_session, coordinator))
    assert coordinator_links == sorted(
        [f"/dashboard/employees/{employee.id}", f"/dashboard/houses/{house_a.id}"]
    )
    assert _notifications_for(db_session, unscoped) == []
    assert _notifications_for(db_session, retired) == []

    db_session.refresh(lapsed)
    assert lapsed.status == Status.OVERDUE


def test_generate_skips_notifications_already_sent_today(db_session):
    house = _create_house(db_session, "Maple House")
    employee = _create_employee(db_session, house)
    _create_user(db_session, "admin@example.com", account_models.UserRole.ADMIN)

    Status = compliance_models.ComplianceStatus
    _create_item(db_session, "CPR Certification", Status.OVERDUE, date(2026, 9, 20), employee=employee)
    _create_item(db_session, "Fire Drill", Status.PENDING, date(2026, 10, 5), house=house)

    first = notification_service.generate_compliance_notifications(db_session, now=NOW)
    db_session.commit()
    second = notification_service.generate_compliance_notifications(
        db_session,
        now=NOW.replace(hour=18),
    )
    db_session.commit()

    assert first["notifications_created"] == 2
    assert second["notifications_created"] == 0
    assert db_session.query(notification_models.Notification).count() == 2


def test_generate_endpoint_requires_cron_secret_when_configured(client, db_session, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    missing = client.get("/notifications/generate")
    wrong = client.get("/notifications/generate", headers={"Authorization": "Bearer nope"})
    ok = client.get("/notifications/generate", headers={"Authorization": "Bearer s3cret"})

    assert missing.status_code == 401
    assert missing.json() == {"error": "Unauthorized"}
    assert wrong.status_code == 401
    assert ok.status_code == 200
    body = ok.json()
    assert body["success"] is True
    assert body["notifications_created"] == 0
    assert body["overdue_marked"] == 0


def test_generate_endpoint_rejects_non_ascii_authorization(client, db_session, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    response = client.get(
        "/notifications/generate",
        headers={"Authorization": "Bearer caf\u00e9".encode("latin-1")},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_generate_endpoint_is_open_without_cron_secret(client, db_session):
    response = client.get("/notifications/generate")

    assert response.status_code == 200


def test_generate_endpoint_failure_returns_500(client, db_session, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("lock timeout")

    monkeypatch.setattr(notification_service, "generate_compliance_notifications", _boom)

    response = client.get("/notifications/generate")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate notifications"}
