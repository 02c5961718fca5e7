# backend/mercylink/__init__.py
"""
Mercy Link operations portal backend.

ORM models live in mercylink/apps/*/models.py. Import
`mercylink.models` (or the app modules directly) before calling
Base.metadata.create_all() so every table is registered.
"""
