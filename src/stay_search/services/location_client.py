"""Client for provider location lookups (free-text name to location code)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from stay_search.config.settings import Settings
from stay_search.core.errors import NetworkError, parse_provider_errors
from stay_search.services.transport import send_with_retry

logger = logging.getLogger(__name__)

LOCATIONS_PATH = "/v1/reference-data/locations"
MIN_KEYWORD_LENGTH = 2


class LocationKind(str, Enum):
    CITY = "CITY"
    AIRPORT = "AIRPORT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "LocationKind":
        try:
            return cls(str(value or "").upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True, slots=True)
class LocationCandidate:
    code: str
    name: str
    kind: LocationKind
    country_code: Optional[str] = None

    @classmethod
    def from_payload(cls, entry: Dict[str, Any]) -> "LocationCandidate":
        address = entry.get("address") or {}
        return cls(
            code=str(entry.get("iataCode") or "").strip(),
            name=str(entry.get("name") or "").strip(),
            kind=LocationKind.parse(entry.get("subType")),
            country_code=address.get("countryCode") if isinstance(address, dict) else None,
        )

    def label(self) -> str:
        if self.country_code:
            return f"{self.name}, {self.country_code} ({self.code})"
        return f"{self.name} ({self.code})"


def iter_candidates(payload: Any) -> Iterable[LocationCandidate]:
    if not isinstance(payload, dict):
        return
    entries = payload.get("data") or []
    if not isinstance(entries, list):
        return
    for entry in entries:
        if isinstance(entry, dict):
            yield LocationCandidate.from_payload(entry)


def choose_location(name: str, candidates: Sequence[LocationCandidate]) -> Optional[str]:
    """Pick the best location code for ``name``; ``None`` when nothing usable exists.

    Order: exact (case-insensitive) name match, preferring a city among the
    exact matches; then the first city; then the first candidate with a code.
    """
    usable = [candidate for candidate in candidates if candidate.code]
    target = name.strip().casefold()

    exact = [candidate for candidate in usable if candidate.name.casefold() == target]
    for candidate in exact:
        if candidate.kind is LocationKind.CITY:
            return candidate.code
    if exact:
        return exact[0].code

    for candidate in usable:
        if candidate.kind is LocationKind.CITY:
            return candidate.code

    if usable:
        return usable[0].code
    return None


class LocationResolver:
    """Thin wrapper around the location search endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def lookup(self, keyword: str, token: str, *, sub_type: str = "CITY") -> List[LocationCandidate]:
        logger.debug("Location lookup keyword='%s' subType=%s", keyword, sub_type)
        response = await send_with_retry(
            self._client,
            "GET",
            f"{self._settings.base_url}{LOCATIONS_PATH}",
            operation="location lookup",
            max_retries=self._settings.max_retries,
            backoff=self._settings.retry_backoff_s,
            params={"subType": sub_type, "keyword": keyword},
            headers={"Authorization": f"Bearer {token}"},
        )
        if not response.is_success:
            for error in parse_provider_errors(response.text):
                logger.error(
                    "Location lookup error (%s): %s - %s",
                    error.status,
                    error.title,
                    error.detail or error.code,
                )
            response.raise_for_status()
        return list(iter_candidates(response.json()))

    async def resolve(self, name: str, token: str) -> Optional[str]:
        try:
            candidates = await self.lookup(name, token)
        except (httpx.HTTPError, NetworkError, ValueError):
            logger.exception("Location lookup failed for '%s'", name)
            return None

        code = choose_location(name, candidates)
        if code:
            logger.info("Resolved '%s' to location code %s", name, code)
        else:
            logger.warning("No location code found for '%s'", name)
        return code

    async def suggest(self, keyword: str, token: str, *, limit: int = 10) -> List[LocationCandidate]:
        """Autocomplete candidates (cities and airports) for a partial destination."""
        if len(keyword.strip()) < MIN_KEYWORD_LENGTH:
            return []
        try:
            candidates = await self.lookup(keyword.strip(), token, sub_type="CITY,AIRPORT")
        except (httpx.HTTPError, NetworkError, ValueError):
            logger.exception("Location suggestions failed for '%s'", keyword)
            return []
        return [candidate for candidate in candidates if candidate.code][:limit]
