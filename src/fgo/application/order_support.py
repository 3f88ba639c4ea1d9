"""Helpers shared by the order use cases: lookups and status refresh."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from fgo.application.audit_recorder import AuditRecorder
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.order import Order, OrderStatus
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.payment_status import PaymentStatusService

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def load_order(order_repo: OrderRepository, order_id: int) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


def load_order_for_item(order_repo: OrderRepository, item_id: str) -> Order:
    order = order_repo.get_by_line_item_id(item_id)
    if order is None:
        raise EntityNotFoundError(f"Order item '{item_id}' not found")
    return order


def refresh_order(
    order: Order,
    payments: PaymentStatusService,
    audit: AuditRecorder,
    actor: str | None,
    now: datetime,
) -> None:
    """Re-derive payment and order status after a change, auditing transitions.

    The caller is responsible for saving the order.
    """
    previous = order.refresh_status(payments.compute(order), now)
    order.touch(now)
    if order.status is previous:
        return
    if order.status is OrderStatus.COMPLETED:
        audit.record(
            order.id, AuditEventType.ORDER_COMPLETED, actor,
            f"Order {order.order_number} completed (full payment received)",
            completed_at=order.completed_at,
        )
    else:
        audit.record(
            order.id, AuditEventType.STATUS_CHANGED, actor,
            f"Status changed from {previous.value} to {order.status.value}",
            previous=previous.value, status=order.status.value,
        )
