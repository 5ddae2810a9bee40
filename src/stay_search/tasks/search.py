"""Hotel search workflow: validate, authenticate, resolve, query, normalise."""
from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from stay_search.auth.token_manager import TokenManager, TokenStore
from stay_search.config.settings import Settings
from stay_search.core.errors import LocationNotFoundError, classify_transport_failure
from stay_search.hotels import Hotel, build_hotels, parse_offers
from stay_search.services.location_client import LocationCandidate, LocationResolver
from stay_search.services.search_client import AvailabilityClient, UnauthorizedSearchError

from .search_payloads import SearchCriteria, build_query, validate_criteria

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    """Normalised hotels for one search plus the location code that was queried."""

    location_code: str
    hotels: List[Hotel] = field(default_factory=list)
    offers_received: int = 0

    @property
    def zero_results(self) -> bool:
        return not self.hotels


class SearchOrchestrator(AbstractAsyncContextManager["SearchOrchestrator"]):
    """Drive one availability search per call.

    The ``TokenStore`` passed in (or created by ``from_settings``) is the only
    state shared between concurrent searches.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        tokens: TokenManager,
        locations: LocationResolver,
        availability: AvailabilityClient,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._tokens = tokens
        self._locations = locations
        self._availability = availability
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SearchOrchestrator":
        client = httpx.AsyncClient(
            timeout=settings.http_timeout_s,
            headers={"Accept": "application/json", "User-Agent": "stay-search/0.1.0"},
            transport=transport,
        )
        return cls(
            settings=settings,
            tokens=TokenManager(client, settings, store=store),
            locations=LocationResolver(client, settings),
            availability=AvailabilityClient(client, settings),
            client=client,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def __aexit__(self, exc_type, exc, exc_tb) -> None:
        await self.aclose()

    async def search(self, criteria: SearchCriteria) -> SearchResult:
        logger.info(
            "Searching hotels in '%s' (%s → %s, %s guests)",
            criteria.destination,
            criteria.check_in,
            criteria.check_out,
            criteria.guests,
        )
        validate_criteria(criteria)
        try:
            return await self._run(criteria)
        except httpx.HTTPError as exc:
            raise classify_transport_failure(exc, operation="hotel search") from exc

    async def _run(self, criteria: SearchCriteria) -> SearchResult:
        token = await self._tokens.get_token()

        location_code = (criteria.location_code or "").strip()
        if not location_code:
            resolved = await self._locations.resolve(criteria.destination.strip(), token)
            if not resolved:
                raise LocationNotFoundError(criteria.destination.strip())
            location_code = resolved

        query = build_query(
            criteria,
            location_code,
            currency=self._settings.currency,
            radius_km=self._settings.search_radius_km,
        )

        try:
            payload = await self._availability.fetch_offers(query, token)
        except UnauthorizedSearchError:
            self._tokens.invalidate()
            token = await self._tokens.get_token()
            payload = await self._availability.fetch_offers(query, token)

        offers = parse_offers(payload)
        hotels = build_hotels(offers)
        if not hotels:
            logger.info("Search for %s returned no usable offers (%s received)", location_code, len(offers))
        else:
            logger.info("Search for %s returned %s hotels", location_code, len(hotels))
        return SearchResult(location_code=location_code, hotels=hotels, offers_received=len(offers))

    async def suggest_locations(self, keyword: str, *, limit: int = 10) -> List[LocationCandidate]:
        token = await self._tokens.get_token()
        return await self._locations.suggest(keyword, token, limit=limit)


async def search_hotels(criteria: SearchCriteria, *, settings: Optional[Settings] = None) -> List[Hotel]:
    """One-shot helper: build an orchestrator, run ``criteria`` and close it."""
    settings = settings or Settings()
    async with SearchOrchestrator.from_settings(settings) as orchestrator:
        result = await orchestrator.search(criteria)
    return result.hotels
