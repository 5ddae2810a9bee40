"""Hotel domain models and normalization helpers."""

from .models import Hotel, RawOffer, parse_offers
from .normalizer import (
    build_hotels,
    estimate_rating,
    filter_offers,
    is_usable_offer,
    normalize_offer,
)

__all__ = [
    "Hotel",
    "RawOffer",
    "build_hotels",
    "estimate_rating",
    "filter_offers",
    "is_usable_offer",
    "normalize_offer",
    "parse_offers",
]
