"""Application service: Create Order use case.

Orchestrates the flow between repositories, the reservation service and
the Order aggregate.  Every requested item is validated against stock
before anything is written.  The writes that follow (order, then one
line item and its reservation at a time) are not transactional; a
failure part way through is reported with the step that failed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import OrderDTO, OrderItemSpec
from fgo.application.order_support import Clock, utcnow
from fgo.application.show_order import order_to_dto
from fgo.domain.exceptions import EntityNotFoundError, OrderCreationStepError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.order import Order, OrderLineItem, PaymentStatus
from fgo.domain.model.stock_lot import StockLot
from fgo.domain.model.value_objects import Money, Quantity
from fgo.domain.repository.customer_repository import CustomerRepository
from fgo.domain.repository.order_number_generator import OrderNumberGenerator
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lot_repo: StockLotRepository,
        customer_repo: CustomerRepository,
        numbers: OrderNumberGenerator,
        reservations: InventoryReservationService,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._lot_repo = lot_repo
        self._customer_repo = customer_repo
        self._numbers = numbers
        self._reservations = reservations
        self._audit = audit
        self._clock = clock or utcnow

    def handle(
        self,
        customer_id: str,
        item_specs: list[OrderItemSpec] | None = None,
        actor: str | None = None,
        order_date: date | None = None,
        sold_by: str | None = None,
        notes: str | None = None,
    ) -> OrderDTO:
        """Create an order, optionally with its first line items.

        Steps:
        1. Check the customer exists and every lot has enough stock.
        2. Generate the order number and save the bare order.
        3. For each item: reserve stock, then attach the item and save.
        4. Derive the status and record the audit trail.
        """
        customer = self._customer_repo.get_by_id(customer_id)
        if customer is None:
            raise EntityNotFoundError(f"Customer '{customer_id}' not found")

        lines = [self._resolve(spec) for spec in item_specs or []]
        self._reservations.validate_items(
            [(lot.id, quantity.value) for lot, quantity, _ in lines]
        )

        now = self._clock()
        order = Order.create(
            order_number=self._numbers.next_number(),
            customer_id=customer.id,
            order_date=order_date or now.date(),
            created_by=actor,
            sold_by=sold_by or actor,
            notes=notes,
        )
        order.created_at = order.updated_at = now
        # The id is assigned by the repository inside its locked write
        try:
            self._order_repo.save(order)
        except Exception as exc:
            raise OrderCreationStepError("order", order.id, exc) from exc

        self._audit.record(
            order.id, AuditEventType.ORDER_CREATED, actor,
            f"Order {order.order_number} created for {customer.name}",
            order_number=order.order_number, customer_id=customer.id,
        )

        for position, (lot, quantity, price) in enumerate(lines, start=1):
            item = OrderLineItem(
                id=uuid.uuid4().hex,
                stock_lot_id=lot.id,
                product_type=lot.product_type,
                quantity=quantity,
                unit_price=price,
                unit=lot.unit,
                created_at=now,
            )
            try:
                self._reservations.reserve(order.id, item.id, lot.id, quantity.value)
                order.add_item(item)
                self._order_repo.save(order)
            except Exception as exc:
                raise OrderCreationStepError(f"item {position}", order.id, exc) from exc
            self._audit.record(
                order.id, AuditEventType.ITEM_ADDED, actor,
                f"Added {quantity} {lot.unit} of {lot.label} at {price}",
                line_item_id=item.id, stock_lot_id=lot.id,
                quantity=quantity.value, unit_price=price,
            )

        order.refresh_status(PaymentStatus.READY_FOR_PAYMENT, now)
        self._order_repo.save(order)
        logger.info(
            "Created order %s (#%s) with %d item(s)",
            order.order_number, order.id, len(order.items),
        )
        return order_to_dto(order, [], customer.name)

    def _resolve(self, spec: OrderItemSpec) -> tuple[StockLot, Quantity, Money]:
        lot = self._lot_repo.get_by_id(spec.stock_lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{spec.stock_lot_id}' not found")
        return lot, Quantity.of(spec.quantity), Money.of(spec.unit_price)
