"""Application service: Update Line Item use case.

A line item can change lot, quantity or price until the first delivery
is recorded against it.  Changing the lot or quantity swaps the item's
reservation in one repository call after re-validating availability,
with the item's own current reservation left out of the check.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import OrderLineItemDTO
from fgo.application.order_support import (
    Clock,
    load_order_for_item,
    refresh_order,
    utcnow,
)
from fgo.application.show_order import item_to_dto
from fgo.domain.exceptions import (
    DeliveredItemImmutableError,
    EntityNotFoundError,
    QuantityBelowDeliveredError,
    ValidationError,
)
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.value_objects import Money, Quantity
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class UpdateItemHandler:

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
        self,
        item_id: str,
        actor: str | None = None,
        stock_lot_id: str | None = None,
        quantity: str | int | Decimal | None = None,
        unit_price: str | int | Decimal | None = None,
    ) -> OrderLineItemDTO:
        if stock_lot_id is None and quantity is None and unit_price is None:
            raise ValidationError("Nothing to update")

        order = load_order_for_item(self._order_repo, item_id)
        order.ensure_unlocked()
        item = order.find_item(item_id)

        new_quantity = Quantity.of(quantity) if quantity is not None else item.quantity
        if new_quantity.value < item.quantity_delivered:
            raise QuantityBelowDeliveredError(
                f"Quantity {new_quantity} {item.unit} is below the "
                f"{item.quantity_delivered:f} {item.unit} already delivered"
            )
        if item.has_deliveries:
            raise DeliveredItemImmutableError(
                f"Item {item.id} has deliveries recorded; only further "
                f"deliveries can change it"
            )

        lot_id = stock_lot_id or item.stock_lot_id
        lot = self._lot_repo.get_by_id(lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{lot_id}' not found")
        new_price = Money.of(unit_price) if unit_price is not None else item.unit_price

        before = {
            "stock_lot_id": item.stock_lot_id,
            "quantity": str(item.quantity.value),
            "unit_price": str(item.unit_price.amount),
        }
        if lot.id != item.stock_lot_id or new_quantity != item.quantity:
            self._reservations.replace(order.id, item.id, lot.id, new_quantity.value)  # type: ignore[arg-type]

        item.stock_lot_id = lot.id
        item.product_type = lot.product_type
        item.unit = lot.unit
        item.quantity = new_quantity
        item.unit_price = new_price
        order.recompute_total()

        now = self._clock()
        refresh_order(order, self._payments, self._audit, actor, now)
        self._order_repo.save(order)

        self._audit.record(
            order.id, AuditEventType.ITEM_UPDATED, actor,
            f"Updated item to {new_quantity} {lot.unit} of {lot.label} at {new_price}",
            line_item_id=item.id, before=before,
            after={
                "stock_lot_id": lot.id,
                "quantity": str(new_quantity.value),
                "unit_price": str(new_price.amount),
            },
        )
        logger.info("Updated item %s of order %s", item.id, order.order_number)
        return item_to_dto(item)
