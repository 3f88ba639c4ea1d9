"""Payment records and the accounting entries that mirror them.

Payments are stored with a coarse *mode* (Cash / UPI / Bank).  Callers
and the accounting side speak in finer *methods*; the two mapping
helpers below translate between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from fgo.domain.exceptions import ValidationError
from fgo.domain.model.value_objects import ZERO, Money


class PaymentMode(Enum):
    CASH = "Cash"
    UPI = "UPI"
    BANK = "Bank"


class PaymentMethod(Enum):
    CASH = "cash"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    CARD = "card"


_METHOD_TO_MODE = {
    PaymentMethod.CASH: PaymentMode.CASH,
    PaymentMethod.UPI: PaymentMode.UPI,
    PaymentMethod.BANK_TRANSFER: PaymentMode.BANK,
    PaymentMethod.CHEQUE: PaymentMode.BANK,
    PaymentMethod.CARD: PaymentMode.BANK,
}

_MODE_TO_METHOD = {
    PaymentMode.CASH: PaymentMethod.CASH,
    PaymentMode.UPI: PaymentMethod.UPI,
    PaymentMode.BANK: PaymentMethod.BANK_TRANSFER,
}


def mode_for_method(method: PaymentMethod) -> PaymentMode:
    return _METHOD_TO_MODE[method]


def method_for_mode(mode: PaymentMode) -> PaymentMethod:
    return _MODE_TO_METHOD[mode]


DEFAULT_PAID_TO = "organization_bank"


@dataclass
class Payment:
    """Money received against an order."""

    id: str
    order_id: int
    amount_received: Money
    payment_date: date
    mode: PaymentMode
    reference: str | None = None
    paid_to: str = DEFAULT_PAID_TO
    paid_to_user: str | None = None
    evidence_url: str | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.amount_received.amount <= ZERO:
            raise ValidationError("Payment amount must be positive")


@dataclass
class AccountingEntry:
    """Income entry kept by the accounting collaborator for one payment."""

    id: str
    payment_id: str
    order_id: int
    amount: Money
    payment_date: date
    method: PaymentMethod
    reference: str | None
    paid_to: str
    paid_to_user: str | None
    reason: str
    description: str
    source: str
