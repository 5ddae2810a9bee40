"""Error taxonomy surfaced to callers and helpers that classify provider failures.

Every failure leaving the search pipeline is one of the ``StaySearchError``
subclasses below. Errors are built where the failure is observed (HTTP status,
provider error envelope, httpx exception type) so callers never need to
inspect message text. Messages are safe to show to an end user: they never
contain credential values.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

logger = logging.getLogger(__name__)

# Provider error codes with dedicated user-facing wording.
INVALID_DATE_CODE = 38196
MANDATORY_PARAMETER_MISSING_CODE = 38191

_BODY_PREVIEW = 512


class StaySearchError(RuntimeError):
    """Base class for every classified failure."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(StaySearchError):
    """Raised when the provider credentials are not configured."""


class AuthError(StaySearchError):
    """Raised when the provider rejects the configured credentials."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ValidationError(StaySearchError):
    """Raised when caller supplied input is malformed."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class LocationNotFoundError(StaySearchError):
    """Raised when a destination cannot be mapped to a location code."""

    def __init__(self, destination: str) -> None:
        super().__init__(
            f'Could not find location code for "{destination}". '
            "Please try a different city name or spelling."
        )
        self.destination = destination


class SearchError(StaySearchError):
    """Raised when the availability query is rejected or fails upstream."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[int] = None,
        title: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.title = title

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status is not None and self.status >= 500


class NetworkError(StaySearchError):
    """Raised on transport level failures (timeouts, DNS, resets)."""

    retryable = True


@dataclass(slots=True)
class ProviderError:
    """One entry of the provider ``errors`` envelope."""

    status: Optional[int]
    code: Optional[int]
    title: Optional[str]
    detail: Optional[str]


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _load_json(body: str) -> Optional[dict[str, Any]]:
    if not body:
        return None
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def parse_provider_errors(body: str) -> List[ProviderError]:
    """Extract the provider ``errors`` list, returning ``[]`` when absent or malformed."""
    payload = _load_json(body)
    if payload is None:
        return []
    entries = payload.get("errors")
    if not isinstance(entries, list):
        return []
    errors: List[ProviderError] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        errors.append(
            ProviderError(
                status=_to_int(entry.get("status")),
                code=_to_int(entry.get("code")),
                title=entry.get("title"),
                detail=entry.get("detail"),
            )
        )
    return errors


def classify_auth_failure(response: httpx.Response, *, credentials_present: bool) -> StaySearchError:
    """Map a failed token request to ``ConfigError`` or ``AuthError``."""
    body = response.text
    logger.error("Token endpoint returned %s: %s", response.status_code, body[:_BODY_PREVIEW])
    if not credentials_present:
        return ConfigError("API credentials missing. Search cannot be performed.")

    message = f"Provider authentication failed: {response.status_code} {response.reason_phrase}".rstrip()
    payload = _load_json(body) or {}
    code = payload.get("code") or "N/A"
    if payload.get("error") == "invalid_client":
        message = (
            "Provider authentication failed: Invalid API key or secret. "
            f"Please verify the configured credentials. (Code: {code})"
        )
    elif payload.get("title"):
        message = f"Provider authentication failed: {payload['title']} (Code: {code})"
    return AuthError(message, status=response.status_code)


def classify_search_failure(response: httpx.Response) -> SearchError:
    """Build a ``SearchError`` from a non-2xx availability response."""
    body = response.text
    logger.error("Hotel search returned %s: %s", response.status_code, body[:_BODY_PREVIEW])
    errors = parse_provider_errors(body)
    if not errors:
        return SearchError(
            f"Hotel search failed: {response.status_code} {response.reason_phrase}".rstrip(),
            status=response.status_code,
        )

    first = errors[0]
    title = first.title or "Unknown error"
    if first.code == INVALID_DATE_CODE:
        message = f"Search failed: {title}. Please check your dates."
    elif first.code == MANDATORY_PARAMETER_MISSING_CODE:
        message = f"Search failed: Missing required information ({title})."
    else:
        message = f"Search failed: {title} (Code: {first.code if first.code is not None else 'N/A'})"
    return SearchError(message, status=response.status_code, code=first.code, title=first.title)


def classify_transport_failure(exc: httpx.HTTPError, *, operation: str) -> NetworkError:
    """Wrap an httpx transport exception in a ``NetworkError``."""
    if isinstance(exc, httpx.TimeoutException):
        message = f"The hotel provider timed out during {operation}. Please try again."
    else:
        message = (
            "Could not connect to the hotel search service. "
            "Please check your internet connection and try again."
        )
    logger.warning("Transport failure during %s: %s", operation, exc.__class__.__name__)
    return NetworkError(message)
