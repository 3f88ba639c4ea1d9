"""Application service: Payment Status use case (query).

Recomputes the status from the stored payments without writing it back,
so calling it any number of times changes nothing.
"""

from __future__ import annotations

from fgo.application.dto import PaymentStatusDTO
from fgo.application.order_support import load_order
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.service.payment_status import (
    PaymentStatusService,
    derive_payment_status,
)


class ShowPaymentStatusHandler:

    def __init__(
        self, order_repo: OrderRepository, payment_repo: PaymentRepository
    ) -> None:
        self._order_repo = order_repo
        self._payments = PaymentStatusService(payment_repo)

    def handle(self, order_id: int) -> PaymentStatusDTO:
        order = load_order(self._order_repo, order_id)
        paid = self._payments.total_paid(order_id)
        net = order.net_total
        return PaymentStatusDTO(
            order_id=order_id,
            payment_status=derive_payment_status(net, paid).value,
            net_total=net,
            total_paid=paid,
            outstanding=max(net - paid, ZERO),
        )
