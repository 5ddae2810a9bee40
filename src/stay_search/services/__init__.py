"""Service clients for the provider travel APIs."""

from .location_client import LocationCandidate, LocationKind, LocationResolver
from .search_client import AvailabilityClient

__all__ = [
    "AvailabilityClient",
    "LocationCandidate",
    "LocationKind",
    "LocationResolver",
]
