"""Application service: List Payments use case (query)."""

from __future__ import annotations

from fgo.application.dto import PaymentDTO
from fgo.application.order_support import load_order
from fgo.application.show_order import payment_to_dto
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository


class ListPaymentsHandler:

    def __init__(
        self, order_repo: OrderRepository, payment_repo: PaymentRepository
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo

    def handle(self, order_id: int | None = None) -> list[PaymentDTO]:
        """Payments of one order, or of all orders, newest first."""
        if order_id is None:
            payments = self._payment_repo.list_all()
        else:
            load_order(self._order_repo, order_id)
            payments = self._payment_repo.list_for_order(order_id)
        ordered = sorted(
            payments, key=lambda p: (p.payment_date, p.created_at), reverse=True
        )
        return [payment_to_dto(p) for p in ordered]
