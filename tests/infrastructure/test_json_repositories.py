"""Tests for the JSON-file repositories against a temporary data directory."""

import json
import threading
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from fgo.application.create_order import CreateOrderHandler
from fgo.application.dto import OrderItemSpec
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.order import Order, OrderLineItem, OrderStatus
from fgo.domain.model.reservation import Reservation
from fgo.domain.model.stock_lot import StockLot, WasteRecord
from fgo.domain.model.value_objects import Money, Quantity
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.infrastructure.persistence.json_order_number_generator import (
    JsonOrderNumberGenerator,
)
from fgo.infrastructure.persistence.json_order_repository import JsonOrderRepository
from fgo.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from fgo.infrastructure.persistence.json_stock_lot_repository import (
    JsonStockLotRepository,
)
from tests.fakes import FakeWorld

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def lots(tmp_path) -> JsonStockLotRepository:
    repo = JsonStockLotRepository(tmp_path / "stock_lots.json", tmp_path / "waste.json")
    repo.save(StockLot.produce("1", "Paneer", Decimal("100"), "kg", "B-001"))
    return repo


@pytest.fixture
def orders(tmp_path) -> JsonOrderRepository:
    return JsonOrderRepository(tmp_path / "orders.json")


def _order(order_id: int | None = None) -> Order:
    order = Order.create("ORD-000001", "1", date(2024, 3, 1), created_by="alice")
    order.id = order_id
    order.add_item(OrderLineItem(
        id="item-1", stock_lot_id="1", product_type="Paneer",
        quantity=Quantity.of("40"), unit_price=Money.of("250"), created_at=NOW,
    ))
    return order


class TestStockLots:

    def test_files_are_created_empty(self, tmp_path):
        JsonStockLotRepository(tmp_path / "a" / "lots.json", tmp_path / "a" / "waste.json")
        assert json.loads((tmp_path / "a" / "lots.json").read_text()) == []

    def test_round_trip(self, lots):
        lot = lots.get_by_id("1")
        assert lot.quantity_created == Decimal("100")
        assert lot.label == "Paneer (B-001)"
        assert lots.get_by_id("2") is None

    def test_adjust_is_clamped(self, lots):
        assert lots.adjust_available("1", Decimal("-30")).quantity_available == Decimal("70")
        assert lots.adjust_available("1", Decimal("-500")).quantity_available == Decimal("0")
        assert lots.adjust_available("1", Decimal("500")).quantity_available == Decimal("100")
        assert lots.get_by_id("1").quantity_available == Decimal("100")

    def test_adjust_unknown_lot(self, lots):
        with pytest.raises(EntityNotFoundError):
            lots.adjust_available("9", Decimal("1"))

    def test_concurrent_adjustments_are_not_lost(self, lots):
        def take():
            for _ in range(10):
                lots.adjust_available("1", Decimal("-1"))

        threads = [threading.Thread(target=take) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert lots.get_by_id("1").quantity_available == Decimal("50")

    def test_waste_totals(self, lots):
        lots.add_waste(WasteRecord("w1", "1", Decimal("2.5"), "Spoiled"))
        lots.add_waste(WasteRecord("w2", "1", Decimal("1"), "Sample"))
        assert lots.total_wasted("1") == Decimal("3.5")
        assert lots.total_wasted("2") == Decimal("0")


class TestOrders:

    def test_round_trip(self, orders):
        order = _order(orders.next_id())
        order.restored_item_ids.append("item-1")
        orders.save(order)

        loaded = orders.get_by_id(1)
        assert loaded == order
        assert loaded.items[0].order_id == 1
        assert orders.get_by_line_item_id("item-1").id == 1
        assert [i.id for i in orders.list_items_for_lot("1")] == ["item-1"]

    def test_assigns_ids_and_updates_in_place(self, orders):
        first = _order()
        orders.save(first)
        second = _order()
        orders.save(second)
        assert (first.id, second.id) == (1, 2)
        assert orders.next_id() == 3

        first.status = OrderStatus.COMPLETED
        orders.save(first)
        assert len(orders.list_all()) == 2
        assert orders.get_by_id(1).status is OrderStatus.COMPLETED

    def test_concurrent_creation_gets_distinct_ids(self, tmp_path):
        barrier = threading.Barrier(2, timeout=5)

        class GatedOrderRepository(JsonOrderRepository):
            # Both creations reach their first write before either one lands
            def save(self, order):
                if order.id is None:
                    barrier.wait()
                super().save(order)

        world = FakeWorld()
        world.add_lot("1", "100")
        orders = GatedOrderRepository(tmp_path / "orders.json")
        reservations = InventoryReservationService(world.lots, orders, world.reservation_repo)
        handler = CreateOrderHandler(orders, world.lots, world.customers, world.numbers,
                                     reservations, world.audit, world.clock)
        created, errors = [], []

        def create():
            try:
                created.append(handler.handle("1", [OrderItemSpec("1", "10", "250")]))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=create) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert sorted(dto.id for dto in created) == [1, 2]
        assert [len(o.items) for o in orders.list_all()] == [1, 1]
        assert sorted(r.order_id for r in world.reservation_repo.list_for_lot("1")) == [1, 2]

    def test_delete(self, orders):
        orders.save(_order())
        orders.delete(1)
        assert orders.get_by_id(1) is None
        orders.delete(1)


class TestReservations:

    def test_replace_keeps_one_per_item(self, tmp_path):
        repo = JsonReservationRepository(tmp_path / "reservations.json")
        repo.replace(Reservation("r1", 1, "item-1", "1", Decimal("40"), NOW))
        repo.replace(Reservation("r2", 1, "item-1", "2", Decimal("30"), NOW))
        repo.replace(Reservation("r3", 1, "item-2", "1", Decimal("5"), NOW))

        assert repo.get_by_line_item("item-1").id == "r2"
        assert [r.id for r in repo.list_for_lot("1")] == ["r3"]
        assert len(repo.list_for_order(1)) == 2

        repo.delete_for_line_item("item-2")
        assert [r.id for r in repo.list_all()] == ["r2"]
        repo.delete_for_order(1)
        assert repo.list_all() == []


class TestOrderNumbers:

    def test_sequence(self, tmp_path, orders):
        numbers = JsonOrderNumberGenerator(tmp_path / "seq.json", orders)
        assert numbers.next_number() == "ORD-000001"
        assert numbers.next_number() == "ORD-000002"
        again = JsonOrderNumberGenerator(tmp_path / "seq.json", orders)
        assert again.next_number() == "ORD-000003"

    def test_falls_back_to_existing_orders(self, tmp_path, orders, caplog):
        order = _order()
        order.order_number = "ORD-000041"
        orders.save(order)
        numbers = JsonOrderNumberGenerator(tmp_path / "seq.json", orders)
        (tmp_path / "seq.json").write_text("not json")

        with caplog.at_level("WARNING", logger="fgo"):
            assert numbers.next_number() == "ORD-000042"
        assert "unusable" in caplog.text
