"""Application service: Apply Discount use case."""

from __future__ import annotations

import logging
from decimal import Decimal

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.value_objects import Money
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class ApplyDiscountHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payments: PaymentStatusService,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._payments = payments
        self._audit = audit
        self._clock = clock or utcnow

    def handle(
        self, order_id: int, amount: str | int | Decimal, actor: str | None = None
    ) -> None:
        order = load_order(self._order_repo, order_id)
        discount = Money.of(amount)
        previous = order.discount_amount
        order.apply_discount(discount)
        refresh_order(order, self._payments, self._audit, actor, self._clock())
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.DISCOUNT_APPLIED, actor,
            f"Discount changed from {previous} to {discount}",
            previous=previous, discount=discount,
            payment_status=order.payment_status,
        )
        logger.info("Discount of %s applied to order %s", discount, order.order_number)
