"""Simulated booking: validates payment shape and produces a ``Trip`` record.

No charge is made and no reservation is created with the provider. The
resulting ``Trip`` is meant to be handed to a trip store.
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Dict

from stay_search.core.errors import ValidationError
from stay_search.hotels import Hotel
from stay_search.tasks.search_payloads import MAX_GUESTS

from .payment import PaymentDetails, validate_payment

logger = logging.getLogger(__name__)


class TripStatus(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Trip:
    id: str
    hotel: Hotel
    check_in: date
    check_out: date
    guests: int
    total_price: float
    status: TripStatus = TripStatus.UPCOMING

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def with_status(self, status: TripStatus) -> "Trip":
        return replace(self, status=status)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "hotel": self.hotel.to_dict(),
            "checkInDate": self.check_in.isoformat(),
            "checkOutDate": self.check_out.isoformat(),
            "numberOfGuests": self.guests,
            "totalPrice": self.total_price,
            "status": self.status.value,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Trip":
        return cls(
            id=str(record["id"]),
            hotel=Hotel.from_dict(record["hotel"]),
            check_in=date.fromisoformat(str(record["checkInDate"])[:10]),
            check_out=date.fromisoformat(str(record["checkOutDate"])[:10]),
            guests=int(record["numberOfGuests"]),
            total_price=float(record["totalPrice"]),
            status=TripStatus(record.get("status") or TripStatus.UPCOMING.value),
        )


def _new_trip_id() -> str:
    return f"trip-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def simulate_booking(
    hotel: Hotel,
    check_in: date,
    check_out: date,
    guests: int,
    payment: PaymentDetails,
) -> Trip:
    """Validate ``payment`` and return an upcoming ``Trip`` for ``hotel``.

    ``hotel.total_price`` is already the price of the whole stay, so it is
    copied to the trip as-is.
    """
    if check_in is None or check_out is None:
        raise ValidationError("Please provide both check-in and check-out dates.", field="check_in")
    if check_out <= check_in:
        raise ValidationError("Check-out date must be after check-in date.", field="check_out")
    if guests < 1:
        raise ValidationError("Please specify at least one guest.", field="guests")
    if guests > MAX_GUESTS:
        raise ValidationError(f"Maximum {MAX_GUESTS} guests per booking.", field="guests")
    validate_payment(payment)

    trip = Trip(
        id=_new_trip_id(),
        hotel=hotel,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        total_price=hotel.total_price,
        status=TripStatus.UPCOMING,
    )
    logger.info(
        "Simulated booking %s at %s (%s) paid with %s",
        trip.id,
        hotel.name,
        hotel.id,
        payment.masked(),
    )
    return trip
