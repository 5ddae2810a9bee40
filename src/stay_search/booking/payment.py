"""Payment detail shape checks for simulated bookings."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from stay_search.core.errors import ValidationError

_CARD_NUMBER = re.compile(r"^\d{16}$")
_EXPIRY = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
_CVC = re.compile(r"^\d{3,4}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CARD_SEPARATORS = re.compile(r"[\s-]")


class PaymentMethod(str, Enum):
    CREDIT_CARD = "creditCard"
    DEBIT_CARD = "debitCard"
    PAYPAL = "paypal"

    @property
    def is_card(self) -> bool:
        return self in (PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD)


@dataclass(frozen=True)
class PaymentDetails:
    method: PaymentMethod
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvc: Optional[str] = None
    paypal_email: Optional[str] = None

    def masked(self) -> str:
        """Loggable description that never includes the full card number."""
        if self.method.is_card:
            digits = _CARD_SEPARATORS.sub("", self.card_number or "")
            return f"{self.method.value} ending {digits[-4:] or '????'}"
        return self.method.value


def validate_payment(details: PaymentDetails) -> None:
    """Raise ``ValidationError`` if ``details`` is malformed for its method."""
    if details.method.is_card:
        number = _CARD_SEPARATORS.sub("", details.card_number or "")
        if not _CARD_NUMBER.match(number):
            raise ValidationError("Card number must be 16 digits.", field="card_number")
        if not _EXPIRY.match((details.expiry_date or "").strip()):
            raise ValidationError("Expiry date must be in MM/YY format.", field="expiry_date")
        if not _CVC.match((details.cvc or "").strip()):
            raise ValidationError("CVC must be 3 or 4 digits.", field="cvc")
        return

    if details.method is PaymentMethod.PAYPAL:
        if not _EMAIL.match((details.paypal_email or "").strip()):
            raise ValidationError("Invalid email address.", field="paypal_email")
        return

    raise ValidationError("Unsupported payment method.", field="method")  # pragma: no cover
