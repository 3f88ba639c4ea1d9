"""Application service: Add Line Item use case."""

from __future__ import annotations

import logging
import uuid

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import OrderItemSpec, OrderLineItemDTO
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.application.show_order import item_to_dto
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.order import OrderLineItem
from fgo.domain.model.value_objects import Money, Quantity
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class AddItemHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lot_repo: StockLotRepository,
        reservations: InventoryReservationService,
        payments: PaymentStatusService,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._lot_repo = lot_repo
        self._reservations = reservations
        self._payments = payments
        self._audit = audit
        self._clock = clock or utcnow

    def handle(
        self, order_id: int, spec: OrderItemSpec, actor: str | None = None
    ) -> OrderLineItemDTO:
        order = load_order(self._order_repo, order_id)
        order.ensure_unlocked()

        lot = self._lot_repo.get_by_id(spec.stock_lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{spec.stock_lot_id}' not found")
        quantity = Quantity.of(spec.quantity)
        price = Money.of(spec.unit_price)

        now = self._clock()
        item = OrderLineItem(
            id=uuid.uuid4().hex,
            stock_lot_id=lot.id,
            product_type=lot.product_type,
            quantity=quantity,
            unit_price=price,
            unit=lot.unit,
            created_at=now,
        )
        # Fails before any write when the lot cannot cover the quantity
        self._reservations.reserve(order.id, item.id, lot.id, quantity.value)  # type: ignore[arg-type]

        order.add_item(item)
        refresh_order(order, self._payments, self._audit, actor, now)
        self._order_repo.save(order)

        self._audit.record(
            order.id, AuditEventType.ITEM_ADDED, actor,
            f"Added {quantity} {lot.unit} of {lot.label} at {price}",
            line_item_id=item.id, stock_lot_id=lot.id,
            quantity=quantity.value, unit_price=price,
        )
        logger.info("Added item %s to order %s", item.id, order.order_number)
        return item_to_dto(item)
