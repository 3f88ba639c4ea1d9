"""Domain service: payment status derivation.

Payment status is a pure function of the order's net total (gross minus
discount) and the sum of its payments.  The result is cached on the order
but can always be recomputed from the payments themselves.
"""

from __future__ import annotations

from decimal import Decimal

from fgo.domain.model.order import Order, PaymentStatus
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.payment_repository import PaymentRepository

# Payments within one paisa of the net total count as full payment.
EPSILON = Decimal("0.01")


def derive_payment_status(net_total: Decimal, total_paid: Decimal) -> PaymentStatus:
    if total_paid == ZERO:
        return PaymentStatus.READY_FOR_PAYMENT
    if total_paid > net_total - EPSILON:
        return PaymentStatus.FULL_PAYMENT
    return PaymentStatus.PARTIAL_PAYMENT


class PaymentStatusService:

    def __init__(self, payment_repo: PaymentRepository) -> None:
        self._payment_repo = payment_repo

    def total_paid(self, order_id: int) -> Decimal:
        return sum(
            (p.amount_received.amount for p in self._payment_repo.list_for_order(order_id)),
            ZERO,
        )

    def compute(self, order: Order) -> PaymentStatus:
        """Derive the status from stored payments. Reads only; never writes."""
        return derive_payment_status(order.net_total, self.total_paid(order.id))  # type: ignore[arg-type]
