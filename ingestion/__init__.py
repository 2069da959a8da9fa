"""
Sync pipeline components for catalog ingestion.

Modules:
    base: Abstract entity kind (endpoint, collection, page fetch, transform)
    entities: Registered entity kinds (products, prices)
    runner: Pagination driver for one entity kind
    scheduler: APScheduler integration for periodic full re-pulls

Subpackages:
    extractors: Catalog API client and page retry wrapper
    transformers: Wire-to-storage transforms
    loaders: Key-value store adapter and sync run log

Architecture:
    For each page the runner fetches with retry, transforms every wire
    entity, and upserts the batch in one transaction before asking for the
    next page. Any unrecovered error aborts the sync of that kind; the
    scheduler decides when the next cycle runs.

Usage:
    from ingestion.entities import PRODUCTS
    from ingestion.loaders.kv_store import KeyValueStore
    from ingestion.runner import SyncRunner

Example:
    store = KeyValueStore()
    runner = SyncRunner(store)
    result = await runner.sync_all(settings.api_config(), PRODUCTS)

    print(f"Loaded {result['records_loaded']} products")
"""

__all__ = [
    "EntityKind",
    "ProductKind",
    "PriceKind",
    "ENTITY_KINDS",
    "SyncRunner",
    "SyncScheduler",
    "CatalogAPIClient",
    "KeyValueStore",
    "SyncRunLog",
]
