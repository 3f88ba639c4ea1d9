"""Unit tests for the Order aggregate and its business rules."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fgo.domain.exceptions import (
    AlreadyLockedError,
    AlreadyOnHoldError,
    EntityNotFoundError,
    InvalidDeliveryRangeError,
    InvalidManualTransitionError,
    NotLockedError,
    NotOnHoldError,
    OrderLockedError,
    OrderNotCompletedError,
    UnlockWindowExpiredError,
    ValidationError,
)
from fgo.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from fgo.domain.model.value_objects import Money, Quantity

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _make_item(qty: str = "10", price: str = "100.00", item_id: str = "i1") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        id=item_id,
        stock_lot_id="1",
        product_type="Paneer",
        quantity=Quantity.of(qty),
        unit_price=Money.of(price),
    )


def _order(*items: OrderLineItem) -> Order:
    order = Order.create("ORD-000001", "1", date(2024, 3, 1))
    order.id = 1
    for item in items:
        order.add_item(item)
    return order


def _completed_order() -> Order:
    order = _order(_make_item())
    order.refresh_status(PaymentStatus.FULL_PAYMENT, NOW)
    return order


class TestOrderCreation:

    def test_starts_created_and_unpaid(self):
        order = Order.create("ORD-000001", "1", date(2024, 3, 1))
        assert order.id is None  # assigned by repository
        assert order.status is OrderStatus.CREATED
        assert order.payment_status is PaymentStatus.READY_FOR_PAYMENT
        assert order.total_amount == Money.zero()

    def test_customer_required(self):
        with pytest.raises(ValidationError, match="Customer"):
            Order.create("ORD-000001", "  ", date(2024, 3, 1))


class TestLineItems:

    def test_total_is_sum_of_line_totals(self):
        order = _order(_make_item("10", "100"), _make_item("2.5", "40", item_id="i2"))
        assert order.total_amount == Money.of("1100")

    def test_add_item_sets_order_id(self):
        order = _order(_make_item())
        assert order.items[0].order_id == 1

    def test_remove_item_recomputes_total(self):
        order = _order(_make_item("10", "100"), _make_item("1", "50", item_id="i2"))
        order.remove_item("i1")
        assert order.total_amount == Money.of("50")

    def test_find_unknown_item(self):
        with pytest.raises(EntityNotFoundError):
            _order().find_item("nope")

    def test_net_total_subtracts_discount(self):
        order = _order(_make_item("10", "100"))
        order.apply_discount(Money.of("100"))
        assert order.net_total == Decimal("900")

    def test_discount_above_total_rejected(self):
        order = _order(_make_item("1", "100"))
        with pytest.raises(ValidationError, match="cannot exceed"):
            order.apply_discount(Money.of("100.01"))


class TestDelivered:

    def test_returns_change(self):
        item = _make_item("40")
        assert item.set_delivered(Decimal("25")) == Decimal("25")
        assert item.set_delivered(Decimal("20")) == Decimal("-5")
        assert item.remaining_quantity == Decimal("20")

    @pytest.mark.parametrize("value", ["-1", "40.01"])
    def test_out_of_range(self, value):
        item = _make_item("40")
        with pytest.raises(InvalidDeliveryRangeError):
            item.set_delivered(Decimal(value))
        assert item.quantity_delivered == Decimal("0")


class TestStatusDerivation:

    def test_items_make_ready_for_payment(self):
        order = _order(_make_item())
        order.refresh_status(PaymentStatus.READY_FOR_PAYMENT, NOW)
        assert order.status is OrderStatus.READY_FOR_PAYMENT

    def test_empty_order_is_created(self):
        order = _order()
        order.refresh_status(PaymentStatus.READY_FOR_PAYMENT, NOW)
        assert order.status is OrderStatus.CREATED

    def test_full_payment_completes(self):
        order = _completed_order()
        assert order.status is OrderStatus.COMPLETED
        assert order.completed_at == NOW

    def test_completed_at_kept_on_recompletion(self):
        order = _completed_order()
        order.refresh_status(PaymentStatus.PARTIAL_PAYMENT, NOW + timedelta(days=1))
        assert order.status is OrderStatus.READY_FOR_PAYMENT
        order.refresh_status(PaymentStatus.FULL_PAYMENT, NOW + timedelta(days=2))
        assert order.completed_at == NOW

    def test_hold_blocks_completion(self):
        order = _order(_make_item())
        order.place_hold("quality check", "bob", NOW)
        order.refresh_status(PaymentStatus.FULL_PAYMENT, NOW)
        assert order.status is OrderStatus.READY_FOR_PAYMENT

    def test_manual_completed_rejected(self):
        with pytest.raises(InvalidManualTransitionError):
            _order().set_status(OrderStatus.COMPLETED)

    def test_manual_status(self):
        order = _order(_make_item())
        order.set_status(OrderStatus.CREATED)
        assert order.status is OrderStatus.CREATED


class TestHold:

    def test_place_and_remove(self):
        order = _order()
        order.place_hold("  awaiting cheque ", "bob", NOW)
        assert order.hold_reason == "awaiting cheque"
        assert order.held_by == "bob"
        order.remove_hold()
        assert not order.is_on_hold
        assert order.held_at is None

    def test_reason_required(self):
        with pytest.raises(ValidationError, match="reason"):
            _order().place_hold("", "bob", NOW)

    def test_twice_rejected(self):
        order = _order()
        order.place_hold("x", "bob", NOW)
        with pytest.raises(AlreadyOnHoldError):
            order.place_hold("y", "bob", NOW)

    def test_remove_when_not_held(self):
        with pytest.raises(NotOnHoldError):
            _order().remove_hold()


class TestLock:

    def test_lock_sets_deadline(self):
        order = _completed_order()
        order.lock("admin", NOW)
        assert order.is_locked
        assert order.unlock_deadline == NOW + timedelta(days=7)

    def test_only_completed(self):
        with pytest.raises(OrderNotCompletedError):
            _order(_make_item()).lock("admin", NOW)

    def test_twice_rejected(self):
        order = _completed_order()
        order.lock("admin", NOW)
        with pytest.raises(AlreadyLockedError):
            order.lock("admin", NOW)

    def test_locked_order_rejects_mutations(self):
        order = _completed_order()
        order.lock("admin", NOW)
        for mutate in (
            lambda: order.add_item(_make_item(item_id="i9")),
            lambda: order.remove_item("i1"),
            lambda: order.apply_discount(Money.of("1")),
            lambda: order.set_status(OrderStatus.CREATED),
            lambda: order.place_hold("x", "bob", NOW),
        ):
            with pytest.raises(OrderLockedError, match="is locked"):
                mutate()

    def test_unlock_within_window(self):
        order = _completed_order()
        order.lock("admin", NOW)
        order.unlock("wrong price", NOW + timedelta(days=7))
        assert not order.is_locked
        assert order.unlock_deadline is None

    def test_unlock_after_window(self):
        order = _completed_order()
        order.lock("admin", NOW)
        with pytest.raises(UnlockWindowExpiredError):
            order.unlock("too late", NOW + timedelta(days=8))
        assert order.is_locked

    def test_unlock_requires_reason(self):
        order = _completed_order()
        order.lock("admin", NOW)
        with pytest.raises(ValidationError, match="reason"):
            order.unlock(" ", NOW)

    def test_unlock_when_not_locked(self):
        with pytest.raises(NotLockedError):
            _order().unlock("why", NOW)

    def test_time_remaining(self):
        order = _completed_order()
        assert order.unlock_time_remaining(NOW) is None
        order.lock("admin", NOW)
        assert order.unlock_time_remaining(NOW + timedelta(days=2)) == timedelta(days=5)
        assert order.unlock_time_remaining(NOW + timedelta(days=9)) == timedelta(0)
        assert order.can_unlock(NOW + timedelta(days=6))
        assert not order.can_unlock(NOW + timedelta(days=8))
