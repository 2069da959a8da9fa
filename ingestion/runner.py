"""
Sync Runner - drives the paginated fetch → transform → persist pipeline.

For one entity kind the runner:
- Ensures the kind's collection exists
- Fetches pages strictly in order, each with bounded retry
- Writes every page in one transaction before the next page is requested
- Stops when the page's "self" link equals its "last" link

Two guards keep the loop finite when the upstream omits those links: an
empty page without them ends the sync, and exceeding ``max_pages`` fails it.
"""

import asyncio
from typing import Any, Dict, Iterable, Optional, Tuple
from core.config import settings
from core.exceptions import PaginationError, SyncError, SyncException
from ingestion.base import EntityKind
from ingestion.extractors.catalog_api import CatalogAPIClient
from ingestion.extractors.retry import fetch_with_retry
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from models.base import SyncStatus
from schemas.catalog import APIConfig, Link
import logging

logger = logging.getLogger(__name__)


def page_links(links: Iterable[Link]) -> Tuple[str, str]:
    """The hrefs of the "self" and "last" links; empty when absent"""
    self_href = ""
    last_href = ""

    for link in links:
        rel = link.rel.lower()
        if rel == "self":
            self_href = link.href
        elif rel == "last":
            last_href = link.href

    return self_href, last_href


def is_last_page(links: Iterable[Link]) -> bool:
    """True when both "self" and "last" links are present and point to the same href"""
    self_href, last_href = page_links(links)
    return bool(self_href) and bool(last_href) and self_href == last_href


class SyncRunner:
    """
    Full re-pull of one entity kind into its collection.

    Responsibilities:
    - Sequential pagination with an inter-page delay
    - All-or-nothing persistence per page
    - Abort the whole sync on the first unrecovered error
    - Record a sync run with accurate statistics
    """

    def __init__(
        self,
        store: KeyValueStore,
        run_log: Optional[SyncRunLog] = None,
        client: Optional[CatalogAPIClient] = None,
        max_attempts: int = settings.MAX_RETRIES,
        page_delay: float = settings.PAGE_DELAY_SECONDS,
        max_pages: int = settings.MAX_PAGES
    ):
        self.store = store
        self.run_log = run_log
        self.client = client or CatalogAPIClient()
        self.max_attempts = max_attempts
        self.page_delay = page_delay
        self.max_pages = max_pages

    async def sync_all(self, config: APIConfig, kind: EntityKind) -> Dict[str, Any]:
        """
        Fetch every page of ``kind`` and persist it.

        Args:
            config: Upstream API configuration
            kind: Entity kind to sync

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - entity_kind: Name of the kind
            - pages_fetched: Number of pages fetched
            - records_loaded: Number of entities written
            - total_records: Total reported by the last page's metadata

        Raises:
            RetryExhaustedError: A page could not be fetched
            PaginationError: More than ``max_pages`` pages without termination
            StorageError: A batch could not be written
            TransformationError: A transform failed
            SyncError: Any other unexpected failure
        """
        await self.store.ensure_collection(kind.collection_name)
        run = await self.run_log.start(kind.name) if self.run_log else None

        page = 1
        pages_fetched = 0
        records_loaded = 0
        total_records: Optional[int] = None

        try:
            while True:
                if page > self.max_pages:
                    raise PaginationError(
                        f"{kind.endpoint} did not reach its last page within {self.max_pages} pages",
                        context={"endpoint": kind.endpoint, "max_pages": self.max_pages}
                    )

                logger.info(f"Fetching {kind.endpoint} page {page}...")
                response = await fetch_with_retry(
                    kind, self.client, config, page, max_attempts=self.max_attempts
                )
                pages_fetched += 1
                total_records = response.metadata.total_records

                written = await self.store.write_batch(
                    kind.collection_name, response.entities, kind.transform
                )
                records_loaded += written

                logger.info(
                    f"Page {page}: {written} {kind.name} processed. "
                    f"Total: {records_loaded}/{total_records}"
                )

                if is_last_page(response.links):
                    logger.info(f"Reached last page. Total {kind.name} processed: {records_loaded}")
                    break

                if not response.entities and not all(page_links(response.links)):
                    logger.warning(
                        f"{kind.endpoint} page {page} was empty and has no self/last links; "
                        f"stopping with {records_loaded} {kind.name} processed"
                    )
                    break

                page += 1
                await asyncio.sleep(self.page_delay)

        except SyncException as e:
            logger.error(
                f"Sync failed for {kind.name} at page {page}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            await self._complete(run, SyncStatus.FAILED, pages_fetched, records_loaded, total_records, str(e))
            raise

        except Exception as e:
            logger.exception(f"Unexpected error syncing {kind.name}")
            await self._complete(run, SyncStatus.FAILED, pages_fetched, records_loaded, total_records, str(e))
            raise SyncError(
                f"Unexpected error syncing {kind.name}",
                context={
                    "entity_kind": kind.name,
                    "page": page,
                    "records_loaded": records_loaded
                },
                original_exception=e
            )

        await self._complete(run, SyncStatus.SUCCESS, pages_fetched, records_loaded, total_records)

        return {
            "status": "success",
            "entity_kind": kind.name,
            "pages_fetched": pages_fetched,
            "records_loaded": records_loaded,
            "total_records": total_records,
        }

    async def _complete(
        self,
        run,
        status: SyncStatus,
        pages_fetched: int,
        records_loaded: int,
        total_records: Optional[int],
        error_message: Optional[str] = None
    ) -> None:
        """Record the run outcome; a bookkeeping failure is logged, never raised"""
        if run is None:
            return
        try:
            await self.run_log.complete(
                run,
                status=status,
                pages_fetched=pages_fetched,
                records_loaded=records_loaded,
                total_records_reported=total_records,
                error_message=error_message
            )
        except SyncException as e:
            logger.error(f"Could not record {status.value} sync run {run.run_id}: {e}")
