"""Application services: lock, unlock and lock information.

A lock freezes a COMPLETED order against every change.  It can be
lifted, with a reason, only until ``unlock_deadline``; after that the
order stays locked for good.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import LockInfoDTO
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.order import (
    UNLOCK_WINDOW,
    Order,
    OrderStatus,
    PaymentStatus,
)
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class LockOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payments: PaymentStatusService,
        audit: AuditRecorder,
        clock: Clock | None = None,
        window: timedelta = UNLOCK_WINDOW,
    ) -> None:
        self._order_repo = order_repo
        self._payments = payments
        self._audit = audit
        self._clock = clock or utcnow
        self._window = window

    def handle(self, order_id: int, actor: str | None = None) -> LockInfoDTO:
        order = load_order(self._order_repo, order_id)
        now = self._clock()

        # A fully paid order whose stored status lags behind is brought
        # up to COMPLETED before the lock check
        if (
            not order.is_locked
            and order.status is not OrderStatus.COMPLETED
            and not order.is_on_hold
            and self._payments.compute(order) is PaymentStatus.FULL_PAYMENT
        ):
            refresh_order(order, self._payments, self._audit, actor, now)
            self._order_repo.save(order)

        order.lock(actor, now, self._window)
        order.touch(now)
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.ORDER_LOCKED, actor,
            f"Order locked; unlock possible until {order.unlock_deadline:%Y-%m-%d %H:%M UTC}",
            unlock_deadline=order.unlock_deadline,
        )
        logger.info("Order %s locked by %s", order.order_number, actor)
        return lock_info(order, now)


class UnlockOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._audit = audit
        self._clock = clock or utcnow

    def handle(self, order_id: int, reason: str, actor: str | None = None) -> None:
        order = load_order(self._order_repo, order_id)
        now = self._clock()
        locked_by = order.locked_by
        order.unlock(reason, now)
        order.touch(now)
        self._order_repo.save(order)
        self._audit.record(
            order.id, AuditEventType.ORDER_UNLOCKED, actor,
            f"Order unlocked: {reason.strip()}",
            reason=reason.strip(), locked_by=locked_by,
        )
        logger.info("Order %s unlocked by %s", order.order_number, actor)


class ShowLockInfoHandler:

    def __init__(self, order_repo: OrderRepository, clock: Clock | None = None) -> None:
        self._order_repo = order_repo
        self._clock = clock or utcnow

    def handle(self, order_id: int) -> LockInfoDTO:
        return lock_info(load_order(self._order_repo, order_id), self._clock())


def lock_info(order: Order, now: datetime) -> LockInfoDTO:
    return LockInfoDTO(
        order_id=order.id,
        order_number=order.order_number,
        is_locked=order.is_locked,
        locked_at=order.locked_at,
        locked_by=order.locked_by,
        unlock_deadline=order.unlock_deadline,
        time_remaining=order.unlock_time_remaining(now),
        can_unlock=order.can_unlock(now),
    )
