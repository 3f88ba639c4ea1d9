"""Application services: place and remove a manual hold.

A held order can never be COMPLETED, so both transitions re-derive the
order status.  Removing a hold from a fully paid order completes it.
"""

from __future__ import annotations

import logging

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.domain.model.audit import AuditEventType
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class SetOnHoldHandler:

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

    def handle(self, order_id: int, reason: str, actor: str | None = None) -> None:
        order = load_order(self._order_repo, order_id)
        now = self._clock()
        order.place_hold(reason, actor, now)
        refresh_order(order, self._payments, self._audit, actor, now)
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.HOLD_PLACED, actor,
            f"Order placed on hold: {order.hold_reason}",
            reason=order.hold_reason,
        )
        logger.info("Order %s placed on hold by %s", order.order_number, actor)


class RemoveHoldHandler:

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

    def handle(self, order_id: int, actor: str | None = None) -> None:
        order = load_order(self._order_repo, order_id)
        reason = order.hold_reason
        order.remove_hold()
        refresh_order(order, self._payments, self._audit, actor, self._clock())
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.HOLD_REMOVED, actor,
            "Hold removed", previous_reason=reason,
        )
        logger.info("Hold removed from order %s by %s", order.order_number, actor)
