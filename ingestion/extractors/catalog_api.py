"""
Catalog API client with authentication headers and failure classification.

Every failure is classified before it leaves this module:
- Retryable: connection timeouts, refused or reset connections, DNS failures,
  unreachable networks, temporary failures, exceeded deadlines, and HTTP
  408, 429, 500, 502, 503, 504
- Non-retryable: everything else, including other non-2xx statuses and
  body/JSON decode failures
"""

import httpx
from typing import Any, Dict, Optional, Type
from schemas.catalog import APIConfig, CatalogEntity, PageResponse
from core.config import settings
from core.exceptions import (
    APIExtractionError,
    AuthenticationError,
    HTTPStatusError,
    NetworkError,
    RateLimitError,
    RequestError,
    ResourceNotFoundError,
    ResponseDecodeError,
    RetryableHTTPError,
)
import logging

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

RETRYABLE_ERROR_MARKERS = (
    "timeout",
    "timed out",
    "connection refused",
    "connection reset",
    "no such host",
    "name or service not known",
    "nodename nor servname",
    "network is unreachable",
    "temporary failure",
    "deadline exceeded",
)


def is_retryable_error(error: BaseException) -> bool:
    """Match the exception type and text against known transient failures"""
    if error is None:
        return False
    text = f"{type(error).__name__}: {error}".lower()
    return any(marker in text for marker in RETRYABLE_ERROR_MARKERS)


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


class CatalogAPIClient:
    """
    Issue authenticated GET requests against the catalog API.

    Attributes:
        timeout: Request timeout in seconds (default: 120.0)
        transport: Optional httpx transport, used to stub the upstream in tests
    """

    def __init__(
        self,
        timeout: float = settings.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self.transport = transport

    @staticmethod
    def build_headers(config: APIConfig) -> Dict[str, str]:
        return {
            "Authorization": config.authorization,
            "Client_Id": config.client_id,
            "Accept-Language": "en",
            "Accept-Encoding": "gzip, deflate",
        }

    async def fetch_page(
        self,
        config: APIConfig,
        endpoint: str,
        page: int,
        wire_model: Type[CatalogEntity],
        customer_param: str = "customer",
    ) -> PageResponse:
        """
        Fetch and decode one page of an endpoint.

        Args:
            config: Upstream API configuration
            endpoint: Endpoint name relative to the base URL
            page: 1-based page number
            wire_model: Entity model used to decode ``entities``
            customer_param: Query key carrying the customer identifier

        Returns:
            PageResponse parameterized by ``wire_model``

        Raises:
            NetworkError: Retryable transport failure
            RequestError: Non-retryable transport failure
            RetryableHTTPError: Status 408, 429, 500, 502, 503 or 504
            HTTPStatusError: Any other non-2xx status
            ResponseDecodeError: Body is not a valid page
        """
        url = f"{config.base_url}/{endpoint}"
        params: Dict[str, Any] = {
            customer_param: config.customer,
            "Limit": config.limit,
            "Page": page,
        }
        context = {"api_url": url, "endpoint": endpoint, "page": page}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=self.build_headers(config), params=params)
        except httpx.HTTPError as e:
            if is_retryable_error(e):
                raise NetworkError(
                    f"Retryable network error fetching {endpoint} page {page}",
                    context=context,
                    original_exception=e
                )
            raise RequestError(
                f"Non-retryable request error fetching {endpoint} page {page}",
                context=context,
                original_exception=e
            )

        status_code = response.status_code

        if is_retryable_status(status_code):
            error_cls = RateLimitError if status_code == 429 else RetryableHTTPError
            raise error_cls(
                f"Retryable HTTP error - status {status_code}",
                status_code=status_code,
                context={**context, "response_body": response.text[:500]}
            )

        if not response.is_success:
            if status_code in (401, 403):
                error_cls = AuthenticationError
            elif status_code == 404:
                error_cls = ResourceNotFoundError
            else:
                error_cls = HTTPStatusError
            raise error_cls(
                f"Non-retryable HTTP error - status {status_code}",
                status_code=status_code,
                context={**context, "response_body": response.text[:500]}
            )

        try:
            data = response.json()
            return PageResponse[wire_model].model_validate(data)
        except ValueError as e:
            # JSONDecodeError and pydantic ValidationError are both ValueErrors
            raise ResponseDecodeError(
                "Failed to decode page response",
                context={**context, "response_body": response.text[:500]},
                original_exception=e
            )
        except Exception as e:
            raise APIExtractionError(
                "Unexpected error reading page response",
                context=context,
                original_exception=e
            )
