"""Application service: manual status change.

Only CREATED and READY_FOR_PAYMENT can be chosen by hand.  The choice
stands until the next item, payment, discount or hold change re-derives
the status.
"""

from __future__ import annotations

import logging

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import Clock, load_order, utcnow
from fgo.domain.exceptions import ValidationError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.order import OrderStatus
from fgo.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._audit = audit
        self._clock = clock or utcnow

    def handle(
        self, order_id: int, status: OrderStatus | str, actor: str | None = None
    ) -> None:
        target = _parse_status(status)
        order = load_order(self._order_repo, order_id)
        previous = order.status
        order.set_status(target)
        if target is previous:
            return
        order.touch(self._clock())
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.STATUS_CHANGED, actor,
            f"Status manually changed from {previous.value} to {target.value}",
            previous=previous, status=target, manual=True,
        )
        logger.info(
            "Order %s status set to %s by %s", order.order_number, target.value, actor
        )


def _parse_status(value: OrderStatus | str) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown order status '{value}'") from None
