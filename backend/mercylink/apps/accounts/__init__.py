# backend/mercylink/apps/accounts/__init__.py
"""
Accounts app

Responsible for:
- Portal login accounts and their roles
- House scope for coordinators and lead staff
- Public auth endpoints (login, logout)

Other apps resolve "who is calling" through `mercylink.security` and
only depend on these models for ownership and house scope.
"""

from . import models  # noqa: F401

__all__ = ["models"]
