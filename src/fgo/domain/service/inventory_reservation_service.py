"""Domain service: Inventory Reservation.

Coordinates the cross-aggregate rules that decide how much of a stock
lot can still be promised, and keeps one reservation per line item in
step with that item.

Two availability figures exist on purpose and are kept apart:

``display_available``
    The lot's running counter minus recorded waste.  This is what a
    catalog browser shows and what order creation has always checked.
    It ignores live reservations.

``available_for_sale``
    Produced quantity minus everything delivered minus the undelivered
    reservations of orders that are not COMPLETED.  Deliveries are
    validated against this figure.

Reserving checks both and reports the smaller, so a reservation can
never push either figure below zero.  All checks run before any write:
a failed reservation leaves no trace.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from decimal import Decimal

from fgo.domain.exceptions import EntityNotFoundError, InsufficientInventoryError
from fgo.domain.model.order import OrderLineItem, OrderStatus
from fgo.domain.model.reservation import Reservation
from fgo.domain.model.stock_lot import StockLot
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.reservation_repository import ReservationRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository

logger = logging.getLogger(__name__)


class InventoryReservationService:

    def __init__(
        self,
        lot_repo: StockLotRepository,
        order_repo: OrderRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._lot_repo = lot_repo
        self._order_repo = order_repo
        self._reservation_repo = reservation_repo

    # --- Availability ---------------------------------------------------------

    def available_for_sale(
        self,
        lot_id: str,
        exclude_order_id: int | None = None,
        exclude_line_item_id: str | None = None,
    ) -> Decimal:
        """Reservation-aware availability, floored at zero.

        ``quantity_created - delivered - active reservations``, where a
        reservation is active while its order is not COMPLETED.  The
        exclusions drop one order's (or one item's) reservations from the
        sum, for callers validating a change to that order or item.
        """
        lot = self._get_lot(lot_id)

        delivered = sum(
            (item.quantity_delivered for item in self._order_repo.list_items_for_lot(lot_id)),
            ZERO,
        )

        statuses: dict[int, OrderStatus | None] = {}
        reserved = ZERO
        for res in self._reservation_repo.list_for_lot(lot_id):
            if exclude_order_id is not None and res.order_id == exclude_order_id:
                continue
            if exclude_line_item_id is not None and res.line_item_id == exclude_line_item_id:
                continue
            if res.order_id not in statuses:
                order = self._order_repo.get_by_id(res.order_id)
                statuses[res.order_id] = order.status if order else None
            status = statuses[res.order_id]
            # Completed orders no longer hold stock; orphans never did
            if status is None or status is OrderStatus.COMPLETED:
                continue
            reserved += res.quantity_reserved

        return max(ZERO, lot.quantity_created - delivered - reserved)

    def display_available(self, lot_id: str) -> Decimal:
        """Creation-time availability: running counter minus waste."""
        lot = self._get_lot(lot_id)
        wasted = self._lot_repo.total_wasted(lot_id)
        return max(ZERO, lot.quantity_available - wasted)

    # --- Validation -----------------------------------------------------------

    def validate_items(self, requests: list[tuple[str, Decimal]]) -> None:
        """Validate a batch of ``(lot_id, quantity)`` before an order is written.

        Quantities drawn from the same lot are added up before checking.
        Every shortfall is collected into one error.
        """
        wanted: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for lot_id, quantity in requests:
            wanted[lot_id] += quantity

        shortfalls: list[str] = []
        for lot_id, quantity in wanted.items():
            lot = self._get_lot(lot_id)
            available = min(self.display_available(lot_id), self.available_for_sale(lot_id))
            if quantity > available:
                shortfalls.append(_shortfall(lot, quantity, available))
        if shortfalls:
            raise InsufficientInventoryError(shortfalls)

    def _check(
        self, lot_id: str, quantity: Decimal, exclude_line_item_id: str | None = None
    ) -> None:
        lot = self._get_lot(lot_id)
        available = min(
            self.display_available(lot_id),
            self.available_for_sale(lot_id, exclude_line_item_id=exclude_line_item_id),
        )
        if quantity > available:
            raise InsufficientInventoryError([_shortfall(lot, quantity, available)])

    def validate_delivery(self, lot_id: str, quantity: Decimal, order_id: int) -> None:
        """Check an additional delivered quantity against the lot.

        The delivering order's own reservations are left out: they are
        the stock being handed over.
        """
        lot = self._get_lot(lot_id)
        available = self.available_for_sale(lot_id, exclude_order_id=order_id)
        if quantity > available:
            raise InsufficientInventoryError([_shortfall(lot, quantity, available)])

    # --- Reservation lifecycle ------------------------------------------------

    def reserve(
        self, order_id: int, line_item_id: str, lot_id: str, quantity: Decimal
    ) -> Reservation:
        """Validate and write a reservation for a new line item."""
        self._require_order(order_id)
        self._check(lot_id, quantity)
        reservation = Reservation(
            id=uuid.uuid4().hex,
            order_id=order_id,
            line_item_id=line_item_id,
            stock_lot_id=lot_id,
            quantity_reserved=quantity,
        )
        self._reservation_repo.replace(reservation)
        logger.debug(
            "Reserved %s of lot %s for order #%s item %s",
            quantity, lot_id, order_id, line_item_id,
        )
        return reservation

    def replace(
        self, order_id: int, line_item_id: str, lot_id: str, quantity: Decimal
    ) -> Reservation:
        """Swap an item's reservation for one on a new lot and/or quantity.

        The item's own prior reservation is left out of the availability
        check since it is the one being replaced.
        """
        self._require_order(order_id)
        self._check(lot_id, quantity, exclude_line_item_id=line_item_id)
        reservation = Reservation(
            id=uuid.uuid4().hex,
            order_id=order_id,
            line_item_id=line_item_id,
            stock_lot_id=lot_id,
            quantity_reserved=quantity,
        )
        self._reservation_repo.replace(reservation)
        return reservation

    def release(self, line_item_id: str) -> None:
        """Remove an item's reservation. Safe to call when there is none."""
        self._reservation_repo.delete_for_line_item(line_item_id)

    def sync_with_delivery(self, item: OrderLineItem) -> None:
        """Shrink (or regrow) an item's reservation to its undelivered remainder."""
        reservation = Reservation(
            id=uuid.uuid4().hex,
            order_id=item.order_id,  # type: ignore[arg-type]
            line_item_id=item.id,
            stock_lot_id=item.stock_lot_id,
            quantity_reserved=max(ZERO, item.remaining_quantity),
        )
        self._reservation_repo.replace(reservation)

    # --- Internal helpers -----------------------------------------------------

    def _get_lot(self, lot_id: str) -> StockLot:
        lot = self._lot_repo.get_by_id(lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{lot_id}' not found")
        return lot

    def _require_order(self, order_id: int) -> None:
        # A reservation of an unknown order would be skipped by every
        # availability sum and so never hold stock
        if self._order_repo.get_by_id(order_id) is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")


def _shortfall(lot: StockLot, requested: Decimal, available: Decimal) -> str:
    return (
        f"{lot.label}: requested {requested:f} {lot.unit}, "
        f"available {available:f} {lot.unit}"
    )
