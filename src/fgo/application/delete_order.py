"""Application service: Delete Order use case.

Deleting an order undoes everything it did to the rest of the system.
The steps run in a fixed order and are each safe to run again:

1. ``restore_stock``   give delivered quantities back to their lots
2. ``accounting``      remove accounting entries mirrored from payments
3. ``invoices``        remove invoice references
4. ``deliveries``      remove dispatch history
5. ``reservations``    release reserved stock
6. ``payments``        remove payments
7. ``line_items``      empty the order
8. ``order``           remove the order itself

There is no surrounding transaction.  When a step fails, the steps
before it stay done and ``DeletionStepError`` names the failed step; the
deletion can simply be retried.  Stock restoration marks each item on
the order as it goes so a retry never gives the same quantity back twice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fgo.application.dto import DeletionPreview
from fgo.application.order_support import Clock, load_order, utcnow
from fgo.domain.exceptions import (
    DeletionCancelledError,
    DeletionStepError,
    OrderLockedError,
)
from fgo.domain.model.order import Order
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.accounting_ledger import AccountingLedger
from fgo.domain.repository.delivery_repository import DeliveryRepository
from fgo.domain.repository.invoice_repository import InvoiceRepository
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.repository.reservation_repository import ReservationRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository

logger = logging.getLogger(__name__)

Confirm = Callable[[DeletionPreview], bool]


class DeleteOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lot_repo: StockLotRepository,
        reservation_repo: ReservationRepository,
        delivery_repo: DeliveryRepository,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        ledger: AccountingLedger,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._lot_repo = lot_repo
        self._reservation_repo = reservation_repo
        self._delivery_repo = delivery_repo
        self._payment_repo = payment_repo
        self._invoice_repo = invoice_repo
        self._ledger = ledger
        self._clock = clock or utcnow

    def preview(self, order_id: int) -> DeletionPreview:
        return self._preview(load_order(self._order_repo, order_id))

    def handle(
        self,
        order_id: int,
        actor: str | None = None,
        confirm: Confirm | None = None,
    ) -> DeletionPreview:
        """Delete an order and unwind its effects.

        ``confirm`` is shown the preview and must return True for the
        deletion to go ahead.  Leaving it out deletes without asking.
        """
        order = load_order(self._order_repo, order_id)
        if order.is_locked:
            raise OrderLockedError(order.order_number)

        preview = self._preview(order)
        if confirm is not None and not confirm(preview):
            raise DeletionCancelledError(
                f"Deletion of order {order.order_number} cancelled"
            )

        steps: list[tuple[str, Callable[[], None]]] = [
            ("restore_stock", lambda: self._restore_stock(order)),
            ("accounting", lambda: self._ledger.delete_for_order(order_id)),
            ("invoices", lambda: self._invoice_repo.delete_for_order(order_id)),
            ("deliveries", lambda: self._delivery_repo.delete_for_order(order_id)),
            ("reservations", lambda: self._reservation_repo.delete_for_order(order_id)),
            ("payments", lambda: self._payment_repo.delete_for_order(order_id)),
            ("line_items", lambda: self._clear_items(order)),
            ("order", lambda: self._order_repo.delete(order_id)),
        ]
        for name, step in steps:
            try:
                step()
            except Exception as exc:
                logger.error(
                    "Deleting order %s failed at step '%s': %s",
                    order.order_number, name, exc,
                )
                raise DeletionStepError(name, order_id, exc) from exc
            logger.debug("Order %s deletion step '%s' done", order.order_number, name)

        logger.info("Order %s (#%s) deleted by %s", order.order_number, order_id, actor)
        return preview

    # --- Steps ----------------------------------------------------------------

    def _restore_stock(self, order: Order) -> None:
        for item in order.items:
            if item.id in order.restored_item_ids or not item.has_deliveries:
                continue
            if self._lot_repo.get_by_id(item.stock_lot_id) is None:
                logger.warning(
                    "Lot %s of item %s no longer exists; nothing to restore",
                    item.stock_lot_id, item.id,
                )
            else:
                lot = self._lot_repo.adjust_available(
                    item.stock_lot_id, item.quantity_delivered
                )
                logger.info(
                    "Restored %s %s to lot %s (now %s available)",
                    item.quantity_delivered, item.unit, lot.id, lot.quantity_available,
                )
            order.restored_item_ids.append(item.id)
            self._order_repo.save(order)

    def _clear_items(self, order: Order) -> None:
        if not order.items:
            return
        order.items.clear()
        order.recompute_total()
        order.touch(self._clock())
        self._order_repo.save(order)

    # --- Internal helpers -----------------------------------------------------

    def _preview(self, order: Order) -> DeletionPreview:
        payments = self._payment_repo.list_for_order(order.id)  # type: ignore[arg-type]
        return DeletionPreview(
            order_id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            delivered=[
                (item.product_type, item.quantity_delivered, item.unit)
                for item in order.items
                if item.has_deliveries
            ],
            payment_count=len(payments),
            total_paid=sum((p.amount_received.amount for p in payments), ZERO),
            invoice_count=len(self._invoice_repo.list_for_order(order.id)),  # type: ignore[arg-type]
        )
