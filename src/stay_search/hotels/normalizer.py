"""Utilities to transform raw provider hotel offers into normalised ``Hotel`` records."""
from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Any, Iterable, List, Optional

from .models import Hotel, RawHotel, RawOffer, RawOfferItem

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"
MAX_AMENITIES = 6
MIN_STARS = 1
MAX_STARS = 5
ESTIMATED_RATING_MIN = 3.0
ESTIMATED_RATING_STEPS = 16  # 3.0, 3.1, ... 4.5

ADDRESS_UNAVAILABLE = "Address Unavailable"
CITY_UNAVAILABLE = "City Unavailable"
NAME_UNAVAILABLE = "Hotel Name Unavailable"
PLACEHOLDER_IMAGE = "https://picsum.photos/seed/{seed}/400/300"


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def has_priced_offer(raw: RawOffer) -> bool:
    offer = raw.first_offer
    if offer is None or offer.price is None:
        return False
    total = offer.price.total
    return total is not None and str(total).strip() != ""


def is_usable_offer(raw: RawOffer) -> bool:
    """An offer is usable when it names a hotel and carries a priced first sub-offer."""
    hotel = raw.hotel
    if hotel is None or not _clean(hotel.hotelId) or not _clean(hotel.name):
        return False
    return has_priced_offer(raw)


def filter_offers(offers: Iterable[RawOffer]) -> List[RawOffer]:
    offers = list(offers)
    usable = [offer for offer in offers if is_usable_offer(offer)]
    dropped = len(offers) - len(usable)
    if dropped:
        logger.warning("Filtered out %s offers missing hotel or price information", dropped)
    return usable


def estimate_rating(seed: str) -> float:
    """Stable placeholder rating in [3.0, 4.5] derived from ``seed``."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    step = int.from_bytes(digest[:4], "big") % ESTIMATED_RATING_STEPS
    return round(ESTIMATED_RATING_MIN + step / 10, 1)


def parse_star_rating(value: Any) -> Optional[int]:
    """Integer star rating within [1, 5], else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        stars = int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None
    if MIN_STARS <= stars <= MAX_STARS:
        return stars
    return None


def _build_address(hotel: RawHotel) -> str:
    address = hotel.address
    if address is None:
        return ADDRESS_UNAVAILABLE
    first_line = address.lines[0] if address.lines else None
    parts = [_clean(part) for part in (first_line, address.cityName, address.postalCode, address.countryCode)]
    joined = ", ".join(part for part in parts if part)
    return joined or ADDRESS_UNAVAILABLE


def _description(hotel: RawHotel, offer: Optional[RawOfferItem], name: str, city: str) -> str:
    if offer is not None and offer.room is not None and offer.room.description is not None:
        text = _clean(offer.room.description.text)
        if text:
            return text
    if hotel.description is not None:
        text = _clean(hotel.description.text)
        if text:
            return text
    return f"Stay at {name} in {city}. Check availability for details."


def _image_url(hotel: RawHotel, seed: str) -> str:
    for media in hotel.media:
        uri = _clean(media.uri)
        if uri:
            return uri
    return PLACEHOLDER_IMAGE.format(seed=seed)


def normalize_offer(raw: RawOffer) -> Hotel:
    """Build a best-effort ``Hotel`` from ``raw``; never raises."""
    hotel = raw.hotel or RawHotel()
    offer = raw.first_offer
    price = offer.price if offer is not None else None

    hotel_id = _clean(hotel.hotelId) or f"unknown-{uuid.uuid4().hex}"
    name = _clean(hotel.name) or NAME_UNAVAILABLE
    city_name = _clean(hotel.address.cityName) if hotel.address else None

    stars = parse_star_rating(hotel.rating)
    if stars is None:
        rating = estimate_rating(hotel_id)
        rating_estimated = True
    else:
        rating = float(stars)
        rating_estimated = False

    total = _to_float(price.total) if price is not None else None
    currency = _clean(price.currency) if price is not None else None

    return Hotel(
        id=hotel_id,
        name=name,
        address=_build_address(hotel),
        city=city_name or CITY_UNAVAILABLE,
        total_price=total if total is not None else 0.0,
        currency=(currency or DEFAULT_CURRENCY).upper(),
        image_url=_image_url(hotel, hotel_id),
        rating=rating,
        rating_estimated=rating_estimated,
        amenities=list(hotel.amenities[:MAX_AMENITIES]),
        description=_description(hotel, offer, name, city_name or "the city"),
        latitude=hotel.latitude,
        longitude=hotel.longitude,
        offer_id=offer.id if offer is not None else None,
    )


def build_hotels(offers: Iterable[RawOffer]) -> List[Hotel]:
    return [normalize_offer(offer) for offer in filter_offers(offers)]
