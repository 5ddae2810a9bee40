"""OAuth2 client-credentials token acquisition with a shared, single-flight cache."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from stay_search.config.settings import Settings
from stay_search.core.errors import AuthError, ConfigError, classify_auth_failure
from stay_search.services.transport import send_with_retry

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Bearer credential and the (buffered) epoch second it stops being used."""

    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenStore:
    """Process-wide cache slot for the provider token.

    One instance is shared by every search in the process. ``lock`` serialises
    refreshes so that concurrent callers holding an expired token trigger a
    single token request.
    """

    def __init__(self) -> None:
        self._token: Optional[AccessToken] = None
        self.lock = asyncio.Lock()

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def get(self, now: float) -> Optional[str]:
        token = self._token
        if token is not None and token.is_valid(now):
            return token.value
        return None

    def set(self, token: AccessToken) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class TokenManager:
    """Acquire and cache bearer tokens for provider requests."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        *,
        store: Optional[TokenStore] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._settings = settings
        self._store = store or TokenStore()
        self._clock = clock

    @property
    def store(self) -> TokenStore:
        return self._store

    async def get_token(self) -> str:
        cached = self._store.get(self._clock())
        if cached:
            return cached

        if not self._settings.has_credentials():
            logger.error("Provider API key/secret not configured; cannot authenticate")
            raise ConfigError("API credentials missing. Search cannot be performed.")

        async with self._store.lock:
            # Another caller may have refreshed while we waited on the lock.
            cached = self._store.get(self._clock())
            if cached:
                return cached
            token = await self._fetch_token()
            self._store.set(token)
            return token.value

    def invalidate(self) -> None:
        logger.info("Discarding cached provider token")
        self._store.clear()

    async def _fetch_token(self) -> AccessToken:
        logger.info("Requesting new provider access token")
        requested_at = self._clock()
        response = await send_with_retry(
            self._client,
            "POST",
            f"{self._settings.base_url}{TOKEN_PATH}",
            operation="token request",
            max_retries=self._settings.max_retries,
            backoff=self._settings.retry_backoff_s,
            data={
                "grant_type": "client_credentials",
                "client_id": self._settings.api_key or "",
                "client_secret": self._settings.api_secret or "",
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not response.is_success:
            raise classify_auth_failure(response, credentials_present=self._settings.has_credentials())

        try:
            payload = response.json()
            value = str(payload["access_token"])
            lifetime = float(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Token endpoint returned an unexpected payload")
            raise AuthError("Provider authentication failed: malformed token response.") from exc
        if not value:
            raise AuthError("Provider authentication failed: empty access token.")

        expires_at = requested_at + lifetime - self._settings.token_expiry_buffer_s
        logger.info("Obtained provider access token valid for %.0fs", lifetime)
        return AccessToken(value=value, expires_at=expires_at)
