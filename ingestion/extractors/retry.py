"""
Bounded exponential-backoff retry around a single page fetch
"""

import asyncio
from typing import Optional
from schemas.catalog import APIConfig, PageResponse
from core.exceptions import RetryExhaustedError, SyncException
import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given failed attempt (1-based): 2, 4, 8, ..."""
    return float(2 ** attempt)


async def fetch_with_retry(
    kind,
    client,
    config: APIConfig,
    page: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> PageResponse:
    """
    Fetch one page, retrying every failure the same way.

    Retryable and non-retryable failures are both retried; the classification
    is only logged. There is no jitter and no cap on the delay.

    Args:
        kind: EntityKind whose page is fetched
        client: CatalogAPIClient used for the request
        config: Upstream API configuration
        page: 1-based page number
        max_attempts: Total number of attempts (default: 3)

    Returns:
        The first successful page response

    Raises:
        RetryExhaustedError: All attempts failed
    """
    last_exception: Optional[BaseException] = None

    for attempt in range(1, max_attempts + 1):
        try:
            response = await kind.fetch_page(client, config, page)
            if attempt > 1:
                logger.info(f"Fetched {kind.endpoint} page {page} on attempt {attempt}")
            return response

        except Exception as e:
            last_exception = e
            classification = (
                "retryable" if isinstance(e, SyncException) and e.retryable else "non-retryable"
            )
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed for {kind.endpoint} page {page} "
                f"({classification}): {e}"
            )

            if attempt < max_attempts:
                delay = backoff_delay(attempt)
                logger.info(
                    f"Waiting {delay:.0f}s before retry {attempt + 1} "
                    f"for {kind.endpoint} page {page}"
                )
                await asyncio.sleep(delay)

    raise RetryExhaustedError(
        f"failed after {max_attempts} attempts: {last_exception}",
        attempts=max_attempts,
        context={"endpoint": kind.endpoint, "page": page},
        original_exception=last_exception
    )
