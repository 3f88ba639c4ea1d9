"""Application service: Delete Line Item use case."""

from __future__ import annotations

import logging

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.order_support import (
    Clock,
    load_order_for_item,
    refresh_order,
    utcnow,
)
from fgo.domain.exceptions import DeliveredItemImmutableError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class DeleteItemHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservations: InventoryReservationService,
        payments: PaymentStatusService,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = reservations
        self._payments = payments
        self._audit = audit
        self._clock = clock or utcnow

    def handle(self, item_id: str, actor: str | None = None) -> None:
        order = load_order_for_item(self._order_repo, item_id)
        order.ensure_unlocked()
        item = order.find_item(item_id)
        if item.has_deliveries:
            raise DeliveredItemImmutableError(
                f"Item {item.id} has deliveries recorded and cannot be deleted"
            )

        order.remove_item(item_id)
        refresh_order(order, self._payments, self._audit, actor, self._clock())
        self._order_repo.save(order)
        # A reservation left behind by a failure here is an orphan that
        # reconciliation removes
        self._reservations.release(item_id)

        self._audit.record(
            order.id, AuditEventType.ITEM_DELETED, actor,
            f"Deleted {item.quantity} {item.unit} of {item.product_type}",
            line_item_id=item.id, stock_lot_id=item.stock_lot_id,
            quantity=item.quantity.value, unit_price=item.unit_price,
        )
        logger.info("Deleted item %s from order %s", item.id, order.order_number)
