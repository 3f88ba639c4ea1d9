"""Application service: find and purge rows left behind by interrupted
multi-step writes.

A row is an orphan when the order it points at no longer exists.  A
reservation is also an orphan when its order exists but no longer has
the line item the reservation belongs to.
"""

from __future__ import annotations

import logging

from fgo.application.dto import ReconciliationReport
from fgo.domain.repository.accounting_ledger import AccountingLedger
from fgo.domain.repository.delivery_repository import DeliveryRepository
from fgo.domain.repository.invoice_repository import InvoiceRepository
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


class ReconcileOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservation_repo: ReservationRepository,
        delivery_repo: DeliveryRepository,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        ledger: AccountingLedger,
    ) -> None:
        self._order_repo = order_repo
        self._reservation_repo = reservation_repo
        self._delivery_repo = delivery_repo
        self._payment_repo = payment_repo
        self._invoice_repo = invoice_repo
        self._ledger = ledger

    def handle(self, purge: bool = False) -> ReconciliationReport:
        orders = {order.id: order for order in self._order_repo.list_all()}
        item_ids = {item.id for order in orders.values() for item in order.items}

        stale_reservations = [
            r for r in self._reservation_repo.list_all()
            if r.order_id not in orders or r.line_item_id not in item_ids
        ]
        dispatches = [d for d in self._delivery_repo.list_all() if d.order_id not in orders]
        payments = [p for p in self._payment_repo.list_all() if p.order_id not in orders]
        entries = [e for e in self._ledger.list_all() if e.order_id not in orders]
        invoices = [i for i in self._invoice_repo.list_all() if i.order_id not in orders]

        report = ReconciliationReport(
            reservations=[r.id for r in stale_reservations],
            dispatches=[d.id for d in dispatches],
            payments=[p.id for p in payments],
            accounting_entries=[e.id for e in entries],
            invoices=[i.id for i in invoices],
            purged=purge,
        )
        if report.total:
            logger.warning("Found %d orphaned row(s)", report.total)
        if not purge:
            return report

        missing = {
            row.order_id
            for rows in (stale_reservations, dispatches, payments, entries, invoices)
            for row in rows
            if row.order_id not in orders
        }
        for order_id in sorted(missing):
            self._ledger.delete_for_order(order_id)
            self._invoice_repo.delete_for_order(order_id)
            self._delivery_repo.delete_for_order(order_id)
            self._reservation_repo.delete_for_order(order_id)
            self._payment_repo.delete_for_order(order_id)
        for reservation in stale_reservations:
            if reservation.order_id in orders:
                self._reservation_repo.delete_for_line_item(reservation.line_item_id)
        logger.info("Purged %d orphaned row(s)", report.total)
        return report
