"""Shared request helper: bounded timeout plus a single bounded retry."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from stay_search.core.errors import classify_transport_failure

logger = logging.getLogger(__name__)


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    operation: str,
    max_retries: int = 1,
    backoff: float = 0.5,
    **kwargs: Any,
) -> httpx.Response:
    """Issue ``method url`` and return the final response.

    Transport errors and 5xx responses are retried up to ``max_retries`` times;
    4xx responses are returned immediately. When every attempt fails at the
    transport level a ``NetworkError`` is raised. The timeout configured on
    ``client`` bounds each attempt.
    """
    attempts = max_retries + 1
    for attempt in range(1, attempts + 1):
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            if attempt >= attempts:
                raise classify_transport_failure(exc, operation=operation) from exc
            logger.warning(
                "%s failed with %s (attempt %s/%s); retrying",
                operation,
                exc.__class__.__name__,
                attempt,
                attempts,
            )
        else:
            if response.status_code < 500 or attempt >= attempts:
                return response
            logger.warning(
                "%s returned %s (attempt %s/%s); retrying",
                operation,
                response.status_code,
                attempt,
                attempts,
            )
        if backoff > 0:
            await asyncio.sleep(backoff)
    raise AssertionError("unreachable")  # pragma: no cover
