"""Client for the provider availability (hotel offers) API."""
from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from stay_search.config.settings import Settings
from stay_search.core.errors import SearchError, classify_search_failure
from stay_search.services.transport import send_with_retry

logger = logging.getLogger(__name__)

HOTEL_OFFERS_PATH = "/v2/shopping/hotel-offers"


class UnauthorizedSearchError(SearchError):
    """Raised when the availability API rejects the bearer token."""


class AvailabilityClient:
    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch_offers(self, query: Dict[str, str], token: str) -> Dict[str, Any]:
        logger.info(
            "Fetching hotel offers for %s (%s → %s, %s adults)",
            query.get("cityCode"),
            query.get("checkInDate"),
            query.get("checkOutDate"),
            query.get("adults"),
        )
        response = await send_with_retry(
            self._client,
            "GET",
            f"{self._settings.base_url}{HOTEL_OFFERS_PATH}",
            operation="hotel search",
            max_retries=self._settings.max_retries,
            backoff=self._settings.retry_backoff_s,
            params=query,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code == 401:
            logger.warning("Hotel search rejected the access token (401)")
            failure = classify_search_failure(response)
            raise UnauthorizedSearchError(failure.message, status=401, code=failure.code, title=failure.title)
        if not response.is_success:
            raise classify_search_failure(response)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Hotel search returned a non-JSON body: %s", response.text[:128])
            raise SearchError("Hotel search returned an unreadable response.", status=response.status_code) from exc
        if not isinstance(payload, dict):
            raise SearchError("Hotel search returned an unexpected response.", status=response.status_code)
        return payload
