"""
SQLAlchemy ORM models for the persistent store.

Models:
    base: Declarative base and shared enums (SyncStatus)
    store: Key-value collections and their entries
    sync_run: Per entity-kind sync tracking

Database Schema:
    The store is a single file-backed SQLite database. Each entity kind owns
    one row in ``kv_collections`` and its records live in ``kv_entries``
    keyed by (collection, key). Values are JSON-encoded bytes.

Usage:
    from models import Collection, Entry, SyncRun
    from models.base import SyncStatus
"""

from models.base import Base, SyncStatus
from models.store import Collection, Entry
from models.sync_run import SyncRun

__all__ = [
    "Base",
    "SyncStatus",
    "Collection",
    "Entry",
    "SyncRun",
]
