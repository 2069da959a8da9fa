"""
Health check endpoint with store and sync status
"""

from fastapi import APIRouter, Depends
from api.dependencies import get_run_log, get_store
from core.exceptions import StorageError
from ingestion.entities import ENTITY_KINDS
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from models.base import SyncStatus
from schemas.api import HealthCheckResponse, SyncRunInfo
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    store: KeyValueStore = Depends(get_store),
    run_log: SyncRunLog = Depends(get_run_log)
):
    """
    Health check endpoint.

    Returns:
    - Store connectivity
    - Entity count per collection
    - Latest sync run per entity kind
    """
    store_connected = True
    collections = {}

    for kind in ENTITY_KINDS:
        try:
            collections[kind.collection_name] = await store.count(kind.collection_name)
        except StorageError as e:
            logger.error(f"Health check could not count {kind.collection_name}: {e}")
            store_connected = False

    last_runs = []
    if store_connected:
        try:
            last_runs = [SyncRunInfo.model_validate(run) for run in await run_log.latest()]
        except StorageError as e:
            logger.error(f"Health check could not read sync runs: {e}")
            store_connected = False

    if not store_connected:
        status = "unhealthy"
    elif any(run.status == SyncStatus.FAILED.value for run in last_runs):
        status = "degraded"
    else:
        status = "healthy"

    return HealthCheckResponse(
        status=status,
        timestamp=datetime.utcnow(),
        store_connected=store_connected,
        collections=collections,
        last_runs=last_runs
    )
