"""Application services: read the audit log, and backfill it for orders
created before auditing was in place.
"""

from __future__ import annotations

import logging

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import load_order
from fgo.domain.model.audit import LOCK_EVENTS, AuditEvent, AuditEventType
from fgo.domain.repository.audit_repository import AuditRepository
from fgo.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ShowAuditLogHandler:

    def __init__(self, order_repo: OrderRepository, audit_repo: AuditRepository) -> None:
        self._order_repo = order_repo
        self._audit_repo = audit_repo

    def handle(self, order_id: int) -> list[AuditEvent]:
        """All events of an order, oldest first."""
        load_order(self._order_repo, order_id)
        return sorted(self._audit_repo.list_for_order(order_id), key=lambda e: e.timestamp)


class LockHistoryHandler:

    def __init__(self, order_repo: OrderRepository, audit_repo: AuditRepository) -> None:
        self._order_repo = order_repo
        self._audit_repo = audit_repo

    def handle(self, order_id: int) -> list[AuditEvent]:
        """Lock and unlock events of an order, newest first."""
        load_order(self._order_repo, order_id)
        events = [
            e for e in self._audit_repo.list_for_order(order_id)
            if e.event_type in LOCK_EVENTS
        ]
        return sorted(events, key=lambda e: e.timestamp, reverse=True)


class BackfillAuditLogHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        audit_repo: AuditRepository,
        audit: AuditRecorder,
    ) -> None:
        self._order_repo = order_repo
        self._audit_repo = audit_repo
        self._audit = audit

    def handle(self, order_id: int) -> bool:
        """Write ORDER_CREATED for an order with an empty log.

        Returns True when an event was written.
        """
        order = load_order(self._order_repo, order_id)
        if self._audit_repo.list_for_order(order_id):
            return False
        event = self._audit.record(
            order.id, AuditEventType.ORDER_CREATED, order.created_by,
            f"Order {order.order_number} created (backfilled)",
            at=order.created_at,
            order_number=order.order_number, customer_id=order.customer_id,
            total=order.total_amount, backfilled=True,
        )
        if event is not None:
            logger.info("Backfilled audit log for order %s", order.order_number)
        return event is not None
