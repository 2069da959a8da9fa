"""
FastAPI dependencies for the read path
"""

from core.config import settings
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog


def get_store() -> KeyValueStore:
    """Store handle configured from settings; opened per operation"""
    return KeyValueStore(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)


def get_run_log() -> SyncRunLog:
    return SyncRunLog(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)
