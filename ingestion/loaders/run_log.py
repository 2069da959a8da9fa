"""
Sync run tracking stored next to the collections
"""

from typing import List, Optional
from datetime import datetime
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from core.config import settings
from core.database import open_session
from core.exceptions import DatabaseError
from models.base import SyncStatus
from models.sync_run import SyncRun
import logging

logger = logging.getLogger(__name__)


class SyncRunLog:
    """Record the start, outcome and statistics of every entity-kind sync"""

    def __init__(
        self,
        database_url: str = settings.DATABASE_URL,
        lock_timeout: float = settings.STORE_LOCK_TIMEOUT
    ):
        self.database_url = database_url
        self.lock_timeout = lock_timeout

    def _session(self):
        return open_session(self.database_url, self.lock_timeout)

    async def start(self, entity_kind: str) -> SyncRun:
        """Create a RUNNING sync run record"""
        run = SyncRun(
            entity_kind=entity_kind,
            status=SyncStatus.RUNNING,
            started_at=datetime.utcnow()
        )
        try:
            async with self._session() as session:
                session.add(run)
                await session.commit()
                await session.refresh(run)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to record sync start for {entity_kind}",
                context={"operation": "INSERT", "table_name": "sync_runs"},
                original_exception=e
            )
        return run

    async def complete(
        self,
        run: SyncRun,
        status: SyncStatus,
        pages_fetched: int = 0,
        records_loaded: int = 0,
        total_records_reported: Optional[int] = None,
        error_message: Optional[str] = None
    ) -> None:
        """Complete a sync run with statistics"""
        completed_at = datetime.utcnow()
        try:
            async with self._session() as session:
                stored = await session.get(SyncRun, run.id)
                if stored is None:
                    logger.warning(f"Sync run {run.run_id} vanished before completion")
                    return
                stored.status = status
                stored.completed_at = completed_at
                stored.duration_seconds = (completed_at - stored.started_at).total_seconds()
                stored.pages_fetched = pages_fetched
                stored.records_loaded = records_loaded
                stored.total_records_reported = total_records_reported
                stored.error_message = error_message
                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to record sync completion for {run.entity_kind}",
                context={"operation": "UPDATE", "table_name": "sync_runs", "run_id": run.run_id},
                original_exception=e
            )

    async def latest(self) -> List[SyncRun]:
        """Most recent run of every entity kind"""
        latest_ids = select(func.max(SyncRun.id)).group_by(SyncRun.entity_kind)
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(SyncRun)
                    .where(SyncRun.id.in_(latest_ids))
                    .order_by(SyncRun.entity_kind)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to read sync runs",
                context={"operation": "SELECT", "table_name": "sync_runs"},
                original_exception=e
            )
