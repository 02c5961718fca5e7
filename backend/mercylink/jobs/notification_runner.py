"""Compliance reminder runner.

Intended for a daily cron entry. Creates overdue / upcoming-deadline
notifications and flips past-due items to OVERDUE.
"""

from __future__ import annotations

from datetime import datetime, timezone

from mercylink import models  # noqa: F401
from mercylink.database import WriteSessionLocal
from mercylink.apps.notifications import service as notification_service


def run() -> dict:
    db = WriteSessionLocal()
    try:
        summary = notification_service.generate_compliance_notifications(
            db,
            now=datetime.now(timezone.utc),
        )
        db.commit()
        return summary
    finally:
        db.close()


if __name__ == "__main__":
    result = run()
    print("Compliance notifications completed:", result)
