"""Application service: Record Delivery use case.

The caller states the new *cumulative* delivered quantity for a line
item.  The change against the previous figure is what moves stock: a
positive change must be covered by the lot's reservation-aware
availability and is taken off the lot's running counter.

A negative change (a delivery corrected downwards) is accepted but does
not give the quantity back to the lot counter.  It is logged so the
discrepancy can be followed up.

The writes run in order ``order``, ``lot``, ``dispatch``, ``reservation``
with no surrounding transaction.  A failing write raises
``DeliveryStepError`` naming that step; the ones before it stay done.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import DeliveryResultDTO
from fgo.application.order_support import Clock, load_order_for_item, utcnow
from fgo.domain.exceptions import DeliveryStepError, InvalidDeliveryRangeError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.delivery import DeliveryDispatch
from fgo.domain.model.order import Order
from fgo.domain.model.value_objects import ZERO, to_decimal
from fgo.domain.repository.delivery_repository import DeliveryRepository
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = logging.getLogger(__name__)


class RecordDeliveryHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lot_repo: StockLotRepository,
        delivery_repo: DeliveryRepository,
        reservations: InventoryReservationService,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._lot_repo = lot_repo
        self._delivery_repo = delivery_repo
        self._reservations = reservations
        self._audit = audit
        self._clock = clock or utcnow

    def handle(
        self,
        item_id: str,
        new_delivered: str | int | Decimal,
        actor: str | None = None,
        delivery_date: date | None = None,
        notes: str | None = None,
    ) -> DeliveryResultDTO:
        order = load_order_for_item(self._order_repo, item_id)
        order.ensure_unlocked()
        item = order.find_item(item_id)

        target = to_decimal(new_delivered, "delivered quantity")
        if target < ZERO or target > item.quantity.value:
            raise InvalidDeliveryRangeError(
                f"Delivery quantity must be between 0 and {item.quantity} {item.unit}"
            )
        delta = target - item.quantity_delivered
        if delta > ZERO:
            self._reservations.validate_delivery(item.stock_lot_id, delta, order.id)  # type: ignore[arg-type]

        lot = self._lot_repo.get_by_id(item.stock_lot_id)
        if delta == ZERO:
            return DeliveryResultDTO(
                line_item_id=item.id,
                quantity_delivered=item.quantity_delivered,
                change=ZERO,
                lot_quantity_available=lot.quantity_available if lot else ZERO,
            )

        now = self._clock()
        item.set_delivered(target)
        order.touch(now)
        try:
            self._order_repo.save(order)
        except Exception as exc:
            raise self._step_failed("order", order, exc) from exc

        if delta > ZERO:
            try:
                lot = self._lot_repo.adjust_available(item.stock_lot_id, -delta)
            except Exception as exc:
                raise self._step_failed("lot", order, exc) from exc
        else:
            logger.warning(
                "Delivery for item %s of order %s reduced by %s %s; "
                "lot %s counter not restored",
                item.id, order.order_number, -delta, item.unit, item.stock_lot_id,
            )

        dispatch = DeliveryDispatch(
            id=uuid.uuid4().hex,
            order_id=order.id,  # type: ignore[arg-type]
            line_item_id=item.id,
            stock_lot_id=item.stock_lot_id,
            quantity_delivered=delta,
            delivery_date=delivery_date or now.date(),
            notes=notes,
            created_by=actor,
            created_at=now,
        )
        try:
            self._delivery_repo.add(dispatch)
        except Exception as exc:
            raise self._step_failed("dispatch", order, exc) from exc

        try:
            self._reservations.sync_with_delivery(item)
        except Exception as exc:
            raise self._step_failed("reservation", order, exc) from exc

        self._audit.record(
            order.id, AuditEventType.DELIVERY_RECORDED, actor,
            f"Delivered {target:f} of {item.quantity} {item.unit} "
            f"{item.product_type} (change {delta:+f})",
            line_item_id=item.id, quantity_delivered=target, change=delta,
        )
        logger.info(
            "Recorded delivery for item %s of order %s: %s %s",
            item.id, order.order_number, target, item.unit,
        )
        return DeliveryResultDTO(
            line_item_id=item.id,
            quantity_delivered=item.quantity_delivered,
            change=delta,
            lot_quantity_available=lot.quantity_available if lot else ZERO,
        )

    @staticmethod
    def _step_failed(step: str, order: Order, exc: Exception) -> DeliveryStepError:
        logger.error(
            "Recording delivery for order %s failed at step '%s': %s",
            order.order_number, step, exc,
        )
        return DeliveryStepError(step, order.id, exc)
