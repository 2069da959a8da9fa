"""
Pydantic schemas for data validation and serialization.

Schemas:
    catalog: Upstream API config, page responses, wire entities and the
        storage entities persisted in the key-value store
    api: Read-side HTTP response models

Usage:
    from schemas.catalog import APIConfig, PageResponse, Product, ProductRequestData
    from schemas.api import ProductResponseData, HealthCheckResponse

Serialization:
    Storage entities are written with ``model_dump_json(by_alias=True)`` so the
    persisted JSON keeps the upstream camelCase field names, and are read back
    with ``model_validate_json``.
"""

__all__ = [
    "APIConfig",
    "CatalogEntity",
    "Link",
    "PageMetadata",
    "PageResponse",
    "Product",
    "ProductRequestData",
    "Price",
    "PriceRequestData",
    "ProductResponseData",
    "SyncRunInfo",
    "HealthCheckResponse",
]
