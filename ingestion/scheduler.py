import logging
from typing import Optional, Sequence
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import settings
from core.exceptions import SyncException
from ingestion.base import EntityKind
from ingestion.entities import ENTITY_KINDS
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from ingestion.runner import SyncRunner

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Run a full sync cycle at startup and then on a fixed interval"""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        run_log: Optional[SyncRunLog] = None,
        kinds: Sequence[EntityKind] = ENTITY_KINDS,
        interval_minutes: int = settings.SYNC_INTERVAL_MINUTES
    ):
        self.scheduler = AsyncIOScheduler()
        self.store = store or KeyValueStore()
        self.run_log = run_log or SyncRunLog(self.store.database_url, self.store.lock_timeout)
        self.runner = SyncRunner(self.store, run_log=self.run_log)
        self.kinds = tuple(kinds)
        self.interval_minutes = interval_minutes

    async def run_sync_cycle(self, stop_on_failure: bool = True) -> bool:
        """
        Sync every entity kind in order.

        An interval cycle stops at the first failing kind. The startup cycle
        passes ``stop_on_failure=False`` so every kind is attempted once.

        Returns:
            True when every kind synced
        """
        logger.info("Scheduler: Starting sync cycle")
        config = settings.api_config()
        succeeded = True

        for kind in self.kinds:
            logger.info(f"Starting {kind.name} fetch...")
            try:
                await self.runner.sync_all(config, kind)
            except SyncException as e:
                logger.error(f"Scheduler: Error fetching {kind.name} - {e}")
                if stop_on_failure:
                    return False
                succeeded = False
                continue
            logger.info(f"{kind.name.capitalize()} fetched successfully!")

        await self.log_collection_counts()
        return succeeded

    async def log_collection_counts(self) -> None:
        """Log how many entities each collection holds after a cycle"""
        for kind in self.kinds:
            try:
                total = await self.store.count(kind.collection_name)
            except SyncException as e:
                logger.error(f"Error counting {kind.collection_name}: {e}")
                continue
            logger.info(f"Total {kind.name} stored in database: {total}")

    def start(self):
        """Start the scheduler; a startup cycle runs immediately, then one per interval"""
        self.scheduler.add_job(
            self.run_sync_cycle,
            kwargs={"stop_on_failure": False},
            id="catalog_sync_startup",
            replace_existing=True
        )
        self.scheduler.add_job(
            self.run_sync_cycle,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="catalog_sync",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"Sync scheduler started (every {self.interval_minutes} minutes)")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Sync scheduler stopped")
