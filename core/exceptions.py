"""
Custom exceptions for the catalog sync pipeline with structured error context.

Every exception carries context information for debugging and a ``retryable``
flag describing how the failure was classified. The flag is diagnostic: the
page retry wrapper retries every fetch failure the same way.

Exception Hierarchy:
    SyncException (base)
    ├── ExtractionError
    │   ├── APIExtractionError
    │   │   ├── NetworkError (retryable)
    │   │   ├── RequestError
    │   │   ├── RetryableHTTPError (retryable)
    │   │   │   └── RateLimitError
    │   │   ├── HTTPStatusError
    │   │   │   ├── AuthenticationError
    │   │   │   └── ResourceNotFoundError
    │   │   ├── ResponseDecodeError
    │   │   └── RetryExhaustedError
    │   └── PaginationError
    ├── TransformationError
    │   └── NormalizationError
    ├── StorageError
    │   ├── DatabaseError
    │   ├── UpsertError
    │   ├── CollectionNotFoundError
    │   └── EntityNotFoundError
    └── SyncError
"""

from typing import Optional, Dict, Any
from datetime import datetime


class SyncException(Exception):
    """
    Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (endpoint, page, sku, etc.)
        original_exception: The original exception that was caught (if any)
    """

    retryable = False

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "retryable": self.retryable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Retry Classification Mixins
# ============================================================================

class RetryableError(SyncException):
    """
    Mixin for transient failures.

    Use this for:
    - Connection timeouts, refused or reset connections
    - DNS and temporary name resolution failures
    - HTTP 408, 429, 500, 502, 503, 504
    """

    retryable = True


class NonRetryableError(SyncException):
    """
    Mixin for permanent failures.

    Use this for:
    - Any other non-2xx HTTP status
    - Body or JSON decode failures
    - Storage lookups that found nothing
    """

    retryable = False


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(SyncException):
    """Base exception for upstream retrieval failures."""
    pass


class APIExtractionError(ExtractionError):
    """
    Exception raised when fetching a page from the catalog API fails.

    Context should include:
        - api_url: The API endpoint that failed
        - page: Page number being fetched
        - status_code: HTTP status code (if applicable)
        - response_body: Response body (truncated if large)
    """
    pass


class NetworkError(RetryableError, APIExtractionError):
    """Transport failures that are worth retrying."""
    pass


class RequestError(NonRetryableError, APIExtractionError):
    """Transport failures that do not look transient."""
    pass


class RetryableHTTPError(RetryableError, APIExtractionError):
    """HTTP responses whose status code marks them as transient."""

    def __init__(
        self,
        message: str,
        status_code: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        super().__init__(message, context, original_exception)
        self.status_code = status_code
        self.context["status_code"] = status_code


class RateLimitError(RetryableHTTPError):
    """Rate limiting errors (HTTP 429)."""
    pass


class HTTPStatusError(NonRetryableError, APIExtractionError):
    """HTTP responses with a non-2xx status outside the retryable set."""

    def __init__(
        self,
        message: str,
        status_code: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        super().__init__(message, context, original_exception)
        self.status_code = status_code
        self.context["status_code"] = status_code


class AuthenticationError(HTTPStatusError):
    """Authentication failures (HTTP 401, 403)."""
    pass


class ResourceNotFoundError(HTTPStatusError):
    """Resource not found errors (HTTP 404)."""
    pass


class ResponseDecodeError(NonRetryableError, APIExtractionError):
    """The response body could not be decoded into a page."""
    pass


class RetryExhaustedError(APIExtractionError):
    """
    Raised when every attempt to fetch a page failed.

    Context should include:
        - attempts: Number of attempts performed
        - page: Page number that could not be fetched
        - endpoint: Upstream endpoint name
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        super().__init__(message, context, original_exception)
        self.attempts = attempts
        self.context["attempts"] = attempts


class PaginationError(ExtractionError):
    """Pagination did not terminate within the configured page bound."""
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(SyncException):
    """Base exception for wire-to-storage transformation failures."""
    pass


class NormalizationError(TransformationError):
    """
    Exception raised when a transform function fails for an entity.

    Context should include:
        - collection: Target collection
        - sku: Identifier of the entity being transformed
    """
    pass


# ============================================================================
# Storage Errors
# ============================================================================

class StorageError(SyncException):
    """Base exception for key-value store failures."""
    pass


class DatabaseError(StorageError):
    """
    Exception raised when opening the store or running a transaction fails.

    Context should include:
        - operation: ensure_collection, write_batch, read_one, read_all, count
        - collection: Name of the collection
    """
    pass


class UpsertError(StorageError):
    """
    Exception raised when a single entity cannot be written.

    Context should include:
        - collection: Name of the collection
        - sku: Identifier of the entity
        - batch_index: Index in the batch
    """
    pass


class CollectionNotFoundError(NonRetryableError, StorageError):
    """The named collection was never created."""
    pass


class EntityNotFoundError(NonRetryableError, StorageError):
    """Point lookup found no entity for the identifier."""
    pass


# ============================================================================
# Orchestration Errors
# ============================================================================

class SyncError(SyncException):
    """Unexpected failure escaping an entity-kind sync."""
    pass
