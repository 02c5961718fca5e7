# backend/mercylink/models.py
"""
Import every app's ORM models so that Alembic and
Base.metadata.create_all() see all tables.
"""

from mercylink.apps.accounts import models as accounts_models          # users / house scope
from mercylink.apps.staffing import models as staffing_models          # houses / employees / assignments
from mercylink.apps.compliance import models as compliance_models      # compliance items
from mercylink.apps.notifications import models as notifications_models
from mercylink.apps.audit import models as audit_models

__all__ = [
    "accounts_models",
    "staffing_models",
    "compliance_models",
    "notifications_models",
    "audit_models",
]
