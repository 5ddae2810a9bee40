from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from conftest import RecordingTransport, token_response
from stay_search.auth.token_manager import AccessToken, TokenManager, TokenStore
from stay_search.config.settings import Settings
from stay_search.core.errors import AuthError, ConfigError, NetworkError


class _Clock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_cached_token_issues_no_request(settings: Settings) -> None:
    transport = RecordingTransport(lambda request: token_response())
    store = TokenStore()
    store.set(AccessToken(value="cached", expires_at=2_000.0))
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings, store=store, clock=_Clock(1_500.0))
        assert await manager.get_token() == "cached"
    assert transport.requests == []


@pytest.mark.asyncio
async def test_expired_token_refreshes_once_with_buffer(settings: Settings) -> None:
    transport = RecordingTransport(lambda request: token_response("fresh", expires_in=1799))
    store = TokenStore()
    store.set(AccessToken(value="stale", expires_at=999.0))
    clock = _Clock(1_000.0)
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings, store=store, clock=clock)
        assert await manager.get_token() == "fresh"

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/security/oauth2/token"
    form = parse_qs(request.content.decode())
    assert form == {
        "grant_type": ["client_credentials"],
        "client_id": ["key"],
        "client_secret": ["secret"],
    }
    assert store.token is not None
    assert store.token.expires_at == 1_000.0 + 1799 - 60


@pytest.mark.asyncio
async def test_token_reused_until_buffered_expiry(settings: Settings) -> None:
    transport = RecordingTransport(lambda request: token_response(expires_in=120))
    clock = _Clock(0.0)
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings, clock=clock)
        await manager.get_token()
        clock.now = 59.0
        await manager.get_token()
        assert len(transport.requests) == 1
        clock.now = 60.0
        await manager.get_token()
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_concurrent_callers_share_single_refresh(settings: Settings) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        return token_response("shared")

    transport = RecordingTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        tokens = await asyncio.gather(*(manager.get_token() for _ in range(8)))

    assert tokens == ["shared"] * 8
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_missing_credentials_raise_config_error_without_request() -> None:
    settings = Settings(_env_file=None, api_key=None, api_secret="  ", base_url="https://provider.test")
    transport = RecordingTransport(lambda request: token_response())
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        with pytest.raises(ConfigError):
            await manager.get_token()
    assert transport.requests == []


@pytest.mark.asyncio
async def test_rejected_credentials_raise_auth_error(settings: Settings) -> None:
    body = {"error": "invalid_client", "error_description": "Client credentials are invalid", "code": 38187}
    transport = RecordingTransport(lambda request: httpx.Response(401, json=body))
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        with pytest.raises(AuthError) as excinfo:
            await manager.get_token()

    message = str(excinfo.value)
    assert "Invalid API key or secret" in message
    assert "38187" in message
    assert "secret" not in message.replace("Invalid API key or secret", "")
    assert manager.store.token is None


@pytest.mark.asyncio
async def test_malformed_token_payload_is_auth_error(settings: Settings) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json={"token_type": "Bearer"}))
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        with pytest.raises(AuthError):
            await manager.get_token()


@pytest.mark.asyncio
async def test_token_timeout_surfaces_network_error(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    transport = RecordingTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        with pytest.raises(NetworkError):
            await manager.get_token()
    # one original attempt plus one retry
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_invalidate_forces_refresh(settings: Settings) -> None:
    responses = iter([token_response("first"), token_response("second")])
    transport = RecordingTransport(lambda request: next(responses))
    async with httpx.AsyncClient(transport=transport) as client:
        manager = TokenManager(client, settings)
        assert await manager.get_token() == "first"
        manager.invalidate()
        assert await manager.get_token() == "second"
