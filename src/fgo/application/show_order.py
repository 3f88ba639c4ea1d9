"""Application service: Show Order use case (query)."""

from __future__ import annotations

from fgo.application.dto import OrderDTO, OrderLineItemDTO, PaymentDTO
from fgo.application.order_support import load_order
from fgo.domain.model.order import Order, OrderLineItem
from fgo.domain.model.payment import Payment
from fgo.domain.model.value_objects import ZERO, Money
from fgo.domain.repository.customer_repository import CustomerRepository
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        customer_repo: CustomerRepository | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._customer_repo = customer_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = load_order(self._order_repo, order_id)
        payments = self._payment_repo.list_for_order(order_id)
        customer_name = None
        if self._customer_repo is not None:
            customer = self._customer_repo.get_by_id(order.customer_id)
            customer_name = customer.name if customer else None
        return order_to_dto(order, payments, customer_name)


def order_to_dto(
    order: Order, payments: list[Payment], customer_name: str | None = None
) -> OrderDTO:
    paid = sum((p.amount_received.amount for p in payments), ZERO)
    net = max(order.net_total, ZERO)
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_id=order.customer_id,
        customer_name=customer_name,
        order_date=order.order_date,
        status=order.status.value,
        display_status="HOLD" if order.is_on_hold else order.status.value,
        payment_status=order.payment_status.value,
        items=[item_to_dto(item) for item in order.items],
        total=str(order.total_amount),
        discount=str(order.discount_amount),
        net_total=str(Money(net)),
        total_paid=str(Money(paid)),
        outstanding=str(Money(max(net - paid, ZERO))),
        is_on_hold=order.is_on_hold,
        hold_reason=order.hold_reason,
        is_locked=order.is_locked,
        unlock_deadline=order.unlock_deadline,
        completed_at=order.completed_at,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        payments=[
            payment_to_dto(p)
            for p in sorted(payments, key=lambda p: (p.payment_date, p.created_at))
        ],
    )


def item_to_dto(item: OrderLineItem) -> OrderLineItemDTO:
    return OrderLineItemDTO(
        id=item.id,
        stock_lot_id=item.stock_lot_id,
        product_type=item.product_type,
        quantity=item.quantity.value,
        quantity_delivered=item.quantity_delivered,
        remaining_quantity=item.remaining_quantity,
        unit=item.unit,
        unit_price=str(item.unit_price),
        line_total=str(item.line_total),
    )


def payment_to_dto(payment: Payment) -> PaymentDTO:
    return PaymentDTO(
        id=payment.id,
        order_id=payment.order_id,
        amount_received=str(payment.amount_received),
        payment_date=payment.payment_date,
        mode=payment.mode.value,
        reference=payment.reference,
        paid_to=payment.paid_to,
        notes=payment.notes,
    )
