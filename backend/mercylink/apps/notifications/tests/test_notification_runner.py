from __future__ import annotations

from datetime import date, timedelta

from mercylink.apps.compliance import models as compliance_models
from mercylink.jobs import notification_runner


def test_run_commits_overdue_flip(db_session, monkeypatch):
    item = compliance_models.ComplianceItem(
        entity_type=compliance_models.ComplianceEntityType.HOUSE,
        item_type="INSPECTION",
        item_name="Boiler Inspection",
        due_date=date.today() - timedelta(days=3),
        status=compliance_models.ComplianceStatus.PENDING,
    )
    db_session.add(item)
    db_session.commit()
    item_id = item.id
    monkeypatch.setattr(notification_runner, "WriteSessionLocal", lambda: db_session)

    summary = notification_runner.run()

    assert summary["notifications_created"] == 0
    assert summary["overdue_marked"] == 1
    refreshed = db_session.get(compliance_models.ComplianceItem, item_id)
    assert refreshed.status == compliance_models.ComplianceStatus.OVERDUE
