import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.logging import setup_logging
from ingestion.entities import ENTITY_KINDS
from ingestion.loaders.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Opening store...")
    store = KeyValueStore(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)

    names = [kind.collection_name for kind in ENTITY_KINDS]
    await store.initialize(names)
    logger.info(f"Collections ready: {', '.join(names)}")


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database())
