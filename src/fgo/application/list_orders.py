"""Application service: List Orders use case (query).

Each row carries tags computed from related records (customer type,
product types and batch references of its lots, payment modes, total
paid) so the listing can be filtered on them.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from fgo.application.dto import OrderFilter, OrderSummaryDTO
from fgo.domain.model.customer import Customer
from fgo.domain.model.order import Order
from fgo.domain.model.payment import Payment
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.customer_repository import CustomerRepository
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        customer_repo: CustomerRepository,
        lot_repo: StockLotRepository,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._customer_repo = customer_repo
        self._lot_repo = lot_repo

    def handle(self, filters: OrderFilter | None = None) -> list[OrderSummaryDTO]:
        """Orders newest first, narrowed by ``filters`` when given."""
        customers = {c.id: c for c in self._customer_repo.list_all()}
        batches = {lot.id: lot.batch_reference for lot in self._lot_repo.list_all()}
        payments: dict[int, list[Payment]] = defaultdict(list)
        for payment in self._payment_repo.list_all():
            payments[payment.order_id].append(payment)

        rows = [
            self._summarize(order, customers.get(order.customer_id),
                            payments.get(order.id, []), batches)  # type: ignore[arg-type]
            for order in self._order_repo.list_all()
        ]
        if filters is not None:
            rows = [row for row in rows if _matches(row, filters)]
        return sorted(rows, key=lambda r: (r.order_date, r.id), reverse=True)

    @staticmethod
    def _summarize(
        order: Order,
        customer: Customer | None,
        payments: list[Payment],
        batches: dict[str, str],
    ) -> OrderSummaryDTO:
        paid: Decimal = sum((p.amount_received.amount for p in payments), ZERO)
        return OrderSummaryDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            customer_id=order.customer_id,
            customer_name=customer.name if customer else None,
            customer_type=customer.customer_type.value if customer else None,
            order_date=order.order_date,
            display_status="HOLD" if order.is_on_hold else order.status.value,
            payment_status=order.payment_status.value,
            total=str(order.total_amount),
            total_paid=paid,
            is_locked=order.is_locked,
            product_types=sorted({item.product_type for item in order.items}),
            batch_references=sorted(
                {batches[i.stock_lot_id] for i in order.items if batches.get(i.stock_lot_id)}
            ),
            payment_modes=sorted({p.mode.value for p in payments}),
        )


def _matches(row: OrderSummaryDTO, f: OrderFilter) -> bool:
    if f.display_status and row.display_status != f.display_status.upper():
        return False
    if f.payment_status and row.payment_status != f.payment_status.upper():
        return False
    if f.customer_id and row.customer_id != f.customer_id:
        return False
    if f.customer_type and (row.customer_type or "").lower() != f.customer_type.lower():
        return False
    if f.product_type and f.product_type.lower() not in (
        p.lower() for p in row.product_types
    ):
        return False
    if f.payment_mode and f.payment_mode.lower() not in (
        m.lower() for m in row.payment_modes
    ):
        return False
    if f.date_from and row.order_date < f.date_from:
        return False
    if f.date_to and row.order_date > f.date_to:
        return False
    if f.search:
        needle = f.search.lower()
        haystack = [row.order_number, row.customer_name or "", *row.batch_references]
        if not any(needle in text.lower() for text in haystack):
            return False
    return True
