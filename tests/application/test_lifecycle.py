"""Integration tests for hold, manual status, discount and lock transitions."""

from datetime import timedelta

import pytest

from fgo.application.add_item import AddItemHandler
from fgo.application.apply_discount import ApplyDiscountHandler
from fgo.application.create_payment import CreatePaymentHandler
from fgo.application.dto import OrderItemSpec
from fgo.application.hold_order import RemoveHoldHandler, SetOnHoldHandler
from fgo.application.lock_order import (
    LockOrderHandler,
    ShowLockInfoHandler,
    UnlockOrderHandler,
)
from fgo.application.show_order import ShowOrderHandler
from fgo.application.update_status import UpdateStatusHandler
from fgo.domain.exceptions import (
    AlreadyLockedError,
    AlreadyOnHoldError,
    InvalidManualTransitionError,
    NotLockedError,
    NotOnHoldError,
    OrderLockedError,
    OrderNotCompletedError,
    UnlockWindowExpiredError,
    ValidationError,
)
from fgo.domain.model.order import OrderStatus
from tests.fakes import FakeWorld


def _setup(paid: str | None = None) -> tuple[FakeWorld, int]:
    world = FakeWorld()
    world.add_lot("1", "100")
    order_id = world.place_order(("1", "50", "20"))
    if paid is not None:
        _pay(world, order_id, paid)
    return world, order_id


def _pay(world: FakeWorld, order_id: int, amount: str) -> None:
    CreatePaymentHandler(world.orders, world.payment_repo, world.mirror,
                         world.audit, world.clock).handle(order_id, amount, actor="cashier")


def _hold(world: FakeWorld, order_id: int, reason: str = "Quality check") -> None:
    SetOnHoldHandler(world.orders, world.payments, world.audit, world.clock).handle(
        order_id, reason, actor="manager"
    )


def _unhold(world: FakeWorld, order_id: int) -> None:
    RemoveHoldHandler(world.orders, world.payments, world.audit, world.clock).handle(
        order_id, actor="manager"
    )


def _lock(world: FakeWorld, order_id: int):
    return LockOrderHandler(world.orders, world.payments, world.audit, world.clock).handle(
        order_id, actor="manager"
    )


def _unlock(world: FakeWorld, order_id: int, reason: str = "Correction") -> None:
    UnlockOrderHandler(world.orders, world.audit, world.clock).handle(
        order_id, reason, actor="manager"
    )


def _status(world: FakeWorld, order_id: int) -> OrderStatus:
    return world.orders.get_by_id(order_id).status


class TestHold:

    def test_hold_blocks_completion(self):
        world, order_id = _setup()
        _hold(world, order_id)
        _pay(world, order_id, "1000")
        assert _status(world, order_id) is OrderStatus.READY_FOR_PAYMENT
        dto = ShowOrderHandler(world.orders, world.payment_repo).handle(order_id)
        assert dto.display_status == "HOLD"
        assert dto.hold_reason == "Quality check"

    def test_removing_hold_completes_paid_order(self):
        world, order_id = _setup()
        _hold(world, order_id)
        _pay(world, order_id, "1000")
        _unhold(world, order_id)
        order = world.orders.get_by_id(order_id)
        assert order.status is OrderStatus.COMPLETED
        assert order.hold_reason is None
        assert world.audit_repo.types_for(order_id)[-2:] == ["ORDER_COMPLETED", "HOLD_REMOVED"]

    def test_holding_completed_order_reopens_it(self):
        world, order_id = _setup(paid="1000")
        _hold(world, order_id)
        assert _status(world, order_id) is OrderStatus.READY_FOR_PAYMENT

    def test_reason_required(self):
        world, order_id = _setup()
        with pytest.raises(ValidationError, match="reason"):
            _hold(world, order_id, reason="  ")

    def test_locked_order_rejects_hold_before_reason_check(self):
        world, order_id = _setup(paid="1000")
        _lock(world, order_id)
        with pytest.raises(OrderLockedError):
            _hold(world, order_id, reason="")
        assert not world.orders.get_by_id(order_id).is_on_hold

    def test_double_hold_and_missing_hold(self):
        world, order_id = _setup()
        with pytest.raises(NotOnHoldError):
            _unhold(world, order_id)
        _hold(world, order_id)
        with pytest.raises(AlreadyOnHoldError):
            _hold(world, order_id)


class TestManualStatus:

    def _set(self, world, order_id, status):
        UpdateStatusHandler(world.orders, world.audit, world.clock).handle(
            order_id, status, actor="manager"
        )

    def test_set_created_until_next_derivation(self):
        world, order_id = _setup()
        self._set(world, order_id, "created")
        assert _status(world, order_id) is OrderStatus.CREATED
        event = world.audit_repo.list_for_order(order_id)[-1]
        assert event.data["manual"] is True

        AddItemHandler(world.orders, world.lots, world.reservations, world.payments,
                       world.audit, world.clock).handle(order_id, OrderItemSpec("1", "1", "20"))
        assert _status(world, order_id) is OrderStatus.READY_FOR_PAYMENT

    def test_completed_cannot_be_set(self):
        world, order_id = _setup()
        with pytest.raises(InvalidManualTransitionError):
            self._set(world, order_id, OrderStatus.COMPLETED)

    def test_unknown_status(self):
        world, order_id = _setup()
        with pytest.raises(ValidationError, match="Unknown order status"):
            self._set(world, order_id, "shipped")

    def test_same_status_is_not_audited(self):
        world, order_id = _setup()
        count = len(world.audit_repo.events)
        self._set(world, order_id, "READY_FOR_PAYMENT")
        assert len(world.audit_repo.events) == count

    def test_locked_order_rejected(self):
        world, order_id = _setup(paid="1000")
        _lock(world, order_id)
        count = len(world.audit_repo.events)
        with pytest.raises(OrderLockedError):
            self._set(world, order_id, "created")
        assert _status(world, order_id) is OrderStatus.COMPLETED
        assert len(world.audit_repo.events) == count


class TestDiscount:

    def _discount(self, world, order_id, amount):
        ApplyDiscountHandler(world.orders, world.payments, world.audit, world.clock).handle(
            order_id, amount, actor="manager"
        )

    def test_discount_can_complete_order(self):
        world, order_id = _setup(paid="900")
        assert _status(world, order_id) is OrderStatus.READY_FOR_PAYMENT
        self._discount(world, order_id, "100")
        assert _status(world, order_id) is OrderStatus.COMPLETED

    def test_discount_above_total(self):
        world, order_id = _setup()
        with pytest.raises(ValidationError, match="cannot exceed"):
            self._discount(world, order_id, "1000.01")


class TestLock:

    def test_only_completed_orders(self):
        world, order_id = _setup()
        with pytest.raises(OrderNotCompletedError):
            _lock(world, order_id)

    def test_lock_sets_seven_day_window(self):
        world, order_id = _setup(paid="1000")
        info = _lock(world, order_id)
        assert info.is_locked
        assert info.locked_by == "manager"
        assert info.unlock_deadline == world.clock.now + timedelta(days=7)
        assert info.time_remaining == timedelta(days=7)
        assert info.can_unlock
        with pytest.raises(AlreadyLockedError):
            _lock(world, order_id)

    def test_locked_order_rejects_changes(self):
        world, order_id = _setup(paid="1000")
        _lock(world, order_id)
        with pytest.raises(OrderLockedError):
            _hold(world, order_id)
        with pytest.raises(OrderLockedError):
            _pay(world, order_id, "1")

    def test_lock_brings_stale_status_up_to_date(self):
        world, order_id = _setup(paid="1000")
        UpdateStatusHandler(world.orders, world.audit, world.clock).handle(
            order_id, "READY_FOR_PAYMENT"
        )
        _lock(world, order_id)
        order = world.orders.get_by_id(order_id)
        assert order.status is OrderStatus.COMPLETED
        assert order.is_locked

    def test_unlock_on_the_deadline(self):
        world, order_id = _setup(paid="1000")
        _lock(world, order_id)
        world.clock.advance(days=7)
        _unlock(world, order_id)
        order = world.orders.get_by_id(order_id)
        assert not order.is_locked
        assert order.unlock_deadline is None
        event = world.audit_repo.list_for_order(order_id)[-1]
        assert event.event_type.value == "ORDER_UNLOCKED"
        assert event.data["reason"] == "Correction"

    def test_unlock_after_window_fails(self):
        world, order_id = _setup(paid="1000")
        _lock(world, order_id)
        world.clock.advance(days=8)
        with pytest.raises(UnlockWindowExpiredError):
            _unlock(world, order_id)
        info = ShowLockInfoHandler(world.orders, world.clock).handle(order_id)
        assert info.is_locked
        assert not info.can_unlock
        assert info.time_remaining == timedelta(0)

    def test_unlock_needs_reason_and_lock(self):
        world, order_id = _setup(paid="1000")
        with pytest.raises(NotLockedError):
            _unlock(world, order_id)
        _lock(world, order_id)
        with pytest.raises(ValidationError, match="reason"):
            _unlock(world, order_id, reason="")

    def test_lock_info_when_unlocked(self):
        world, order_id = _setup()
        info = ShowLockInfoHandler(world.orders, world.clock).handle(order_id)
        assert not info.is_locked
        assert info.time_remaining is None
        assert not info.can_unlock
