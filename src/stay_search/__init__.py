"""Hotel inventory search client for the Amadeus self-service APIs."""

from stay_search.booking import PaymentDetails, PaymentMethod, Trip, TripStatus, simulate_booking
from stay_search.core.errors import (
    AuthError,
    ConfigError,
    LocationNotFoundError,
    NetworkError,
    SearchError,
    StaySearchError,
    ValidationError,
)
from stay_search.hotels import Hotel
from stay_search.tasks import SearchCriteria, SearchOrchestrator, SearchResult, search_hotels

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "ConfigError",
    "Hotel",
    "LocationNotFoundError",
    "NetworkError",
    "PaymentDetails",
    "PaymentMethod",
    "SearchCriteria",
    "SearchError",
    "SearchOrchestrator",
    "SearchResult",
    "StaySearchError",
    "Trip",
    "TripStatus",
    "ValidationError",
    "search_hotels",
    "simulate_booking",
]
