"""Runtime configuration for the hotel search client.

Relies on pydantic-settings so that environment variables (prefixed with ``AMADEUS_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

TEST_BASE_URL = "https://test.api.amadeus.com"
PRODUCTION_BASE_URL = "https://api.amadeus.com"

MAX_SEARCH_RADIUS_KM = 300


class Settings(BaseSettings):
    """Captures runtime configuration for provider access."""

    api_key: Optional[str] = Field(default=None, description="Provider API key (client id)")
    api_secret: Optional[str] = Field(default=None, description="Provider API secret (client secret)")
    base_url: str = Field(
        default=TEST_BASE_URL,
        description="Provider host; switch to the production host for live inventory",
    )

    http_timeout_s: float = Field(default=10.0, description="Timeout applied to every outbound request")
    token_expiry_buffer_s: int = Field(
        default=60, description="Seconds subtracted from the provider token lifetime"
    )
    max_retries: int = Field(
        default=1, description="Retries on 5xx or transport failures; 4xx is never retried"
    )
    retry_backoff_s: float = Field(default=0.5, description="Pause before a retry attempt")

    currency: str = Field(default="USD", description="Currency requested from the availability search")
    search_radius_km: int = Field(default=20, description="Search radius around the city code")

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))
    trips_path: Path = Field(default=Path("data/trips.json"), description="JSON file backing the trip store")

    model_config = SettingsConfigDict(
        env_prefix="AMADEUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("api_key", "api_secret", mode="before")
    def _blank_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("base_url", mode="before")
    def _strip_base_url(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            return TEST_BASE_URL
        return text.rstrip("/")

    @field_validator("http_timeout_s")
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("http_timeout_s must be positive")
        return value

    @field_validator("token_expiry_buffer_s", "max_retries")
    def _validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("value must not be negative")
        return value

    @field_validator("search_radius_km")
    def _cap_radius(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("search_radius_km must be positive")
        if value > MAX_SEARCH_RADIUS_KM:
            logger.warning("search_radius_km %s capped to %s", value, MAX_SEARCH_RADIUS_KM)
            return MAX_SEARCH_RADIUS_KM
        return value

    @field_validator("currency", mode="before")
    def _upper_currency(cls, value: object) -> str:
        text = str(value or "").strip().upper()
        return text or "USD"

    @field_validator("log_dir", "trips_path", mode="before")
    def _expand_path(cls, value: str | Path) -> Path:
        if isinstance(value, Path):
            return value
        return Path(value).expanduser()

    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.trips_path.parent.mkdir(parents=True, exist_ok=True)
