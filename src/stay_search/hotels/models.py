"""Provider wire schema (pydantic) and the normalised ``Hotel`` record."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as SchemaError, field_validator

logger = logging.getLogger(__name__)


def _coerce_string_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def _mapping_or_none(value: object) -> object:
    return value if isinstance(value, dict) else None


def _float_or_none(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawDescription(_WireModel):
    lang: Optional[str] = None
    text: Optional[str] = None


class RawMedia(_WireModel):
    uri: Optional[str] = None
    category: Optional[str] = None


class RawAddress(_WireModel):
    lines: List[str] = []
    postalCode: Optional[str] = None
    cityName: Optional[str] = None
    countryCode: Optional[str] = None
    stateCode: Optional[str] = None

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_lines(cls, value: object) -> List[str]:
        return _coerce_string_list(value)


class RawHotel(_WireModel):
    hotelId: Optional[str] = None
    chainCode: Optional[str] = None
    name: Optional[str] = None
    rating: Optional[str | int | float] = None
    cityCode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[RawAddress] = None
    amenities: List[str] = []
    description: Optional[RawDescription] = None
    media: List[RawMedia] = []

    @field_validator("amenities", mode="before")
    @classmethod
    def _coerce_amenity_codes(cls, value: object) -> List[str]:
        return _coerce_string_list(value)

    @field_validator("media", mode="before")
    @classmethod
    def _keep_media_mappings(cls, value: object) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("address", "description", mode="before")
    @classmethod
    def _drop_malformed_sections(cls, value: object) -> object:
        return _mapping_or_none(value)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: object) -> Optional[float]:
        return _float_or_none(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _drop_malformed_rating(cls, value: object) -> object:
        return value if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


class RawPrice(_WireModel):
    currency: Optional[str] = None
    total: Optional[str | float] = None
    base: Optional[str | float] = None


class RawRoom(_WireModel):
    type: Optional[str] = None
    description: Optional[RawDescription] = None


class RawOfferItem(_WireModel):
    id: Optional[str] = None
    checkInDate: Optional[str] = None
    checkOutDate: Optional[str] = None
    room: Optional[RawRoom] = None
    price: Optional[RawPrice] = None

    @field_validator("room", mode="before")
    @classmethod
    def _drop_malformed_room(cls, value: object) -> object:
        return _mapping_or_none(value)


class RawOffer(_WireModel):
    """One entry of the availability response ``data`` array."""

    type: Optional[str] = None
    hotel: Optional[RawHotel] = None
    available: Optional[bool] = None
    offers: List[RawOfferItem] = []

    @property
    def first_offer(self) -> Optional[RawOfferItem]:
        return self.offers[0] if self.offers else None


def parse_offers(payload: Dict[str, Any]) -> List[RawOffer]:
    """Validate every entry of ``payload["data"]``.

    Malformed optional sections (amenities, media, coordinates, address) fall
    back to their defaults; entries whose core shape is wrong are dropped.
    """
    entries = payload.get("data")
    if not isinstance(entries, list):
        logger.warning("Availability payload has no data array")
        return []
    offers: List[RawOffer] = []
    for index, entry in enumerate(entries):
        try:
            offers.append(RawOffer.model_validate(entry))
        except SchemaError as exc:
            logger.warning("Skipping offer %s with unexpected shape: %s", index, exc.error_count())
    return offers


@dataclass(slots=True)
class Hotel:
    """Normalised hotel offer handed to callers."""

    id: str
    name: str
    address: str
    city: str
    total_price: float
    currency: str
    image_url: str
    rating: float
    rating_estimated: bool = False
    amenities: List[str] = field(default_factory=list)
    description: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    offer_id: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "totalPrice": self.total_price,
            "currency": self.currency,
            "imageUrl": self.image_url,
            "rating": self.rating,
            "ratingEstimated": self.rating_estimated,
            "amenities": list(self.amenities),
            "description": self.description,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "offerId": self.offer_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hotel":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            address=data.get("address") or "",
            city=data.get("city") or "",
            total_price=float(data.get("totalPrice") or 0.0),
            currency=data.get("currency") or "USD",
            image_url=data.get("imageUrl") or "",
            rating=float(data.get("rating") or 0.0),
            rating_estimated=bool(data.get("ratingEstimated", False)),
            amenities=list(data.get("amenities") or []),
            description=data.get("description") or "",
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            offer_id=data.get("offerId"),
        )

    @classmethod
    def from_iterable(cls, records: Iterable["Hotel"]) -> List[dict[str, object]]:
        return [record.to_dict() for record in records]
