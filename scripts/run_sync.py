"""
Script to run one full sync cycle for every registered entity kind
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.exceptions import SyncException
from core.logging import setup_logging
from ingestion.entities import ENTITY_KINDS
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from ingestion.runner import SyncRunner

logger = logging.getLogger(__name__)


async def run_sync() -> int:
    """Sync every entity kind in order; returns a process exit code"""
    store = KeyValueStore(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)
    run_log = SyncRunLog(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)
    runner = SyncRunner(store, run_log=run_log)
    config = settings.api_config()

    await store.initialize(kind.collection_name for kind in ENTITY_KINDS)

    for kind in ENTITY_KINDS:
        try:
            logger.info(f"Running sync for {kind.name}")
            result = await runner.sync_all(config, kind)
            logger.info(
                f"Sync completed for {kind.name}: "
                f"Pages={result['pages_fetched']}, "
                f"Loaded={result['records_loaded']}"
            )
        except SyncException as e:
            logger.error(f"Sync failed for {kind.name}: {e}")
            return 1

    for kind in ENTITY_KINDS:
        logger.info(f"Total {kind.name} stored: {await store.count(kind.collection_name)}")

    logger.info("All sync jobs completed")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(run_sync()))
