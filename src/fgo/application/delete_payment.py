"""Application service: Delete Payment use case.

The accounting entry mirrored from the payment is left in place.
"""

from __future__ import annotations

import logging

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class DeletePaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._audit = audit
        self._payments = PaymentStatusService(payment_repo)
        self._clock = clock or utcnow

    def handle(self, payment_id: str, actor: str | None = None) -> None:
        payment = self._payment_repo.get_by_id(payment_id)
        if payment is None:
            raise EntityNotFoundError(f"Payment '{payment_id}' not found")
        order = load_order(self._order_repo, payment.order_id)
        order.ensure_unlocked()

        self._payment_repo.delete(payment.id)
        refresh_order(order, self._payments, self._audit, actor, self._clock())
        self._order_repo.save(order)

        self._audit.record(
            order.id, AuditEventType.PAYMENT_DELETED, actor,
            f"Deleted payment of {payment.amount_received}",
            payment_id=payment.id, amount=payment.amount_received,
            payment_status=order.payment_status,
        )
        logger.info("Deleted payment %s of order %s", payment.id, order.order_number)
