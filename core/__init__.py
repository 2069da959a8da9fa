"""
Core utilities and configuration for the catalog sync service.

Modules:
    config: Application configuration and environment variable management
    database: Store engine and per-operation session management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import open_session
    from core.exceptions import APIExtractionError, NetworkError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "open_session",
    "create_schema",
    "setup_logging",
    # Exceptions
    "SyncException",
    "RetryableError",
    "NonRetryableError",
    "ExtractionError",
    "APIExtractionError",
    "NetworkError",
    "RequestError",
    "RetryableHTTPError",
    "RateLimitError",
    "HTTPStatusError",
    "AuthenticationError",
    "ResourceNotFoundError",
    "ResponseDecodeError",
    "RetryExhaustedError",
    "PaginationError",
    "TransformationError",
    "NormalizationError",
    "StorageError",
    "DatabaseError",
    "UpsertError",
    "CollectionNotFoundError",
    "EntityNotFoundError",
    "SyncError",
]
