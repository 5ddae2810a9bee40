from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List

import httpx
import pytest

from stay_search.config.settings import Settings

BASE_URL = "https://provider.test"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.requests: List[httpx.Request] = []

        async def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            result = handler(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        super().__init__(_record)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


def token_response(value: str = "token-1", expires_in: int = 1799) -> httpx.Response:
    return httpx.Response(200, json={"access_token": value, "expires_in": expires_in, "token_type": "Bearer"})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_key="key",
        api_secret="secret",
        base_url=BASE_URL,
        retry_backoff_s=0,
        http_timeout_s=2.0,
    )


@pytest.fixture
def package_logging() -> Iterator[logging.Logger]:
    """Drop whatever handlers ``configure_logging`` attached during the test."""
    package_logger = logging.getLogger("stay_search")
    level = package_logger.level
    yield package_logger
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)
