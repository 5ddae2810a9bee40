"""Search criteria validation and availability query construction."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from stay_search.config.settings import MAX_SEARCH_RADIUS_KM
from stay_search.core.errors import ValidationError

MAX_GUESTS = 10
MIN_DESTINATION_LENGTH = 2


@dataclass(frozen=True)
class SearchCriteria:
    destination: str
    check_in: Optional[date]
    check_out: Optional[date]
    guests: int = 1
    location_code: Optional[str] = None

    @property
    def nights(self) -> int:
        if self.check_in is None or self.check_out is None:
            return 0
        return (self.check_out - self.check_in).days


def validate_criteria(criteria: SearchCriteria) -> None:
    """Raise ``ValidationError`` for the first malformed field."""
    destination = (criteria.destination or "").strip()
    if not destination:
        raise ValidationError("Please provide a destination city for the search.", field="destination")
    if len(destination) < MIN_DESTINATION_LENGTH:
        raise ValidationError(
            f"Destination must be at least {MIN_DESTINATION_LENGTH} characters.", field="destination"
        )
    if criteria.check_in is None or criteria.check_out is None:
        raise ValidationError(
            "Please provide both check-in and check-out dates for the search.",
            field="check_in" if criteria.check_in is None else "check_out",
        )
    if criteria.check_out <= criteria.check_in:
        raise ValidationError("Check-out date must be after check-in date.", field="check_out")
    if criteria.guests < 1:
        raise ValidationError("Please specify at least one guest.", field="guests")
    if criteria.guests > MAX_GUESTS:
        raise ValidationError(f"Maximum {MAX_GUESTS} guests per search.", field="guests")


def build_query(
    criteria: SearchCriteria,
    location_code: str,
    *,
    currency: str = "USD",
    radius_km: int = 20,
) -> dict[str, str]:
    """Availability query parameters for a validated ``criteria``."""
    if criteria.check_in is None or criteria.check_out is None:
        raise ValidationError("Please provide both check-in and check-out dates for the search.", field="check_in")
    radius = min(max(int(radius_km), 1), MAX_SEARCH_RADIUS_KM)
    return {
        "cityCode": location_code.strip().upper(),
        "checkInDate": criteria.check_in.isoformat(),
        "checkOutDate": criteria.check_out.isoformat(),
        "adults": str(criteria.guests),
        "currency": currency,
        "radius": str(radius),
        "radiusUnit": "KM",
        "view": "LIGHT",
        "bestRateOnly": "true",
    }
