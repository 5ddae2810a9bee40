"""Simulated booking helpers."""

from .payment import PaymentDetails, PaymentMethod, validate_payment
from .simulate import Trip, TripStatus, simulate_booking

__all__ = [
    "PaymentDetails",
    "PaymentMethod",
    "Trip",
    "TripStatus",
    "simulate_booking",
    "validate_payment",
]
