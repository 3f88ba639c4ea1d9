"""Integration tests for adding, changing and removing line items."""

from decimal import Decimal

import pytest

from fgo.application.add_item import AddItemHandler
from fgo.application.delete_item import DeleteItemHandler
from fgo.application.dto import OrderItemSpec
from fgo.application.record_delivery import RecordDeliveryHandler
from fgo.application.update_item import UpdateItemHandler
from fgo.domain.exceptions import (
    DeliveredItemImmutableError,
    EntityNotFoundError,
    InsufficientInventoryError,
    OrderLockedError,
    QuantityBelowDeliveredError,
    ValidationError,
)
from fgo.domain.model.value_objects import Money
from tests.fakes import FakeWorld


def _setup() -> tuple[FakeWorld, int]:
    world = FakeWorld()
    world.add_lot("1", "100")
    world.add_lot("2", "50", product_type="Ghee", batch_reference="G-1")
    order_id = world.place_order(("1", "40", "10"))
    return world, order_id


def _add(world: FakeWorld) -> AddItemHandler:
    return AddItemHandler(world.orders, world.lots, world.reservations,
                          world.payments, world.audit, world.clock)


def _update(world: FakeWorld) -> UpdateItemHandler:
    return UpdateItemHandler(world.orders, world.lots, world.reservations,
                             world.payments, world.audit, world.clock)


def _delete(world: FakeWorld) -> DeleteItemHandler:
    return DeleteItemHandler(world.orders, world.reservations, world.payments,
                             world.audit, world.clock)


def _item_id(world: FakeWorld, order_id: int, index: int = 0) -> str:
    return world.orders.get_by_id(order_id).items[index].id


def _lock(world: FakeWorld, order_id: int) -> None:
    order = world.orders.get_by_id(order_id)
    order.is_locked = True
    world.orders.save(order)


def _deliver(world: FakeWorld, item_id: str, quantity: str) -> None:
    RecordDeliveryHandler(world.orders, world.lots, world.deliveries,
                          world.reservations, world.audit, world.clock).handle(item_id, quantity)


class TestAddItem:

    def test_adds_and_reserves(self):
        world, order_id = _setup()
        dto = _add(world).handle(order_id, OrderItemSpec("2", "5", "600"), actor="bob")
        order = world.orders.get_by_id(order_id)
        assert len(order.items) == 2
        assert order.total_amount == Money.of("3400")
        assert world.reservation_repo.get_by_line_item(dto.id).quantity_reserved == Decimal("5")
        assert world.audit_repo.types_for(order_id)[-1] == "ITEM_ADDED"

    def test_first_item_makes_ready_for_payment(self):
        world = FakeWorld()
        world.add_lot("1", "100")
        order_id = world.place_order()
        assert world.orders.get_by_id(order_id).status.value == "CREATED"
        _add(world).handle(order_id, OrderItemSpec("1", "1", "10"))
        assert world.orders.get_by_id(order_id).status.value == "READY_FOR_PAYMENT"

    def test_insufficient_stock_leaves_order_untouched(self):
        world, order_id = _setup()
        with pytest.raises(InsufficientInventoryError):
            _add(world).handle(order_id, OrderItemSpec("1", "61", "10"))
        assert len(world.orders.get_by_id(order_id).items) == 1
        assert len(world.reservation_repo.list_all()) == 1

    def test_locked_order_rejected(self):
        world, order_id = _setup()
        _lock(world, order_id)
        with pytest.raises(OrderLockedError):
            _add(world).handle(order_id, OrderItemSpec("2", "1", "10"))
        assert len(world.reservation_repo.list_all()) == 1

    def test_unknown_order(self):
        world, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Order #99"):
            _add(world).handle(99, OrderItemSpec("1", "1", "10"))


class TestUpdateItem:

    def test_change_quantity_replaces_reservation(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        dto = _update(world).handle(item_id, quantity="100")
        assert dto.quantity == Decimal("100")
        assert world.reservation_repo.get_by_line_item(item_id).quantity_reserved == Decimal("100")
        assert world.orders.get_by_id(order_id).total_amount == Money.of("1000")

    def test_move_to_other_lot(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        dto = _update(world).handle(item_id, stock_lot_id="2", quantity="10")
        assert dto.product_type == "Ghee"
        assert world.reservations.available_for_sale("1") == Decimal("100")
        assert world.reservations.available_for_sale("2") == Decimal("40")

    def test_price_only_keeps_reservation(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        before = world.reservation_repo.get_by_line_item(item_id)
        _update(world).handle(item_id, unit_price="12.50")
        assert world.reservation_repo.get_by_line_item(item_id) == before
        assert world.orders.get_by_id(order_id).total_amount == Money.of("500")

    def test_over_stock_rejected_without_changes(self):
        world, order_id = _setup()
        world.place_order(("1", "50", "10"))
        item_id = _item_id(world, order_id)
        with pytest.raises(InsufficientInventoryError):
            _update(world).handle(item_id, quantity="51")
        assert world.reservation_repo.get_by_line_item(item_id).quantity_reserved == Decimal("40")
        assert world.orders.get_by_id(order_id).items[0].quantity.value == Decimal("40")

    def test_delivered_item_is_immutable(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _deliver(world, item_id, "10")
        with pytest.raises(DeliveredItemImmutableError):
            _update(world).handle(item_id, unit_price="11")

    def test_quantity_below_delivered(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _deliver(world, item_id, "10")
        with pytest.raises(QuantityBelowDeliveredError):
            _update(world).handle(item_id, quantity="5")

    def test_nothing_to_update(self):
        world, order_id = _setup()
        with pytest.raises(ValidationError, match="Nothing"):
            _update(world).handle(_item_id(world, order_id))

    def test_locked_order_rejected(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _lock(world, order_id)
        with pytest.raises(OrderLockedError):
            _update(world).handle(item_id, quantity="1")

    def test_audited_with_before_and_after(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _update(world).handle(item_id, quantity="30", actor="bob")
        event = world.audit_repo.list_for_order(order_id)[-1]
        assert event.event_type.value == "ITEM_UPDATED"
        assert event.data["before"]["quantity"] == "40"
        assert event.data["after"]["quantity"] == "30"


class TestDeleteItem:

    def test_releases_reservation(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _delete(world).handle(item_id, actor="bob")
        order = world.orders.get_by_id(order_id)
        assert order.items == []
        assert order.total_amount == Money.zero()
        assert order.status.value == "CREATED"
        assert world.reservation_repo.list_all() == []
        assert "ITEM_DELETED" in world.audit_repo.types_for(order_id)

    def test_delivered_item_cannot_be_deleted(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _deliver(world, item_id, "1")
        with pytest.raises(DeliveredItemImmutableError):
            _delete(world).handle(item_id)

    def test_locked_order_rejected(self):
        world, order_id = _setup()
        item_id = _item_id(world, order_id)
        _lock(world, order_id)
        with pytest.raises(OrderLockedError):
            _delete(world).handle(item_id)
        assert world.reservation_repo.get_by_line_item(item_id) is not None

    def test_unknown_item(self):
        world, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Order item"):
            _delete(world).handle("nope")
