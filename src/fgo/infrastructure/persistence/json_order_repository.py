"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from fgo.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from fgo.domain.model.value_objects import Quantity
from fgo.domain.repository.order_repository import OrderRepository
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    dump_dt,
    dump_money,
    load_date,
    load_dt,
    load_money,
    remove_where,
    upsert,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._store.load()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._store.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_line_item_id(self, item_id: str) -> Order | None:
        for raw in self._store.load():
            if any(i["id"] == item_id for i in raw["items"]):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def list_items_for_lot(self, lot_id: str) -> list[OrderLineItem]:
        return [
            self._item_to_domain(i, raw["id"])
            for raw in self._store.load()
            for i in raw["items"]
            if i["stock_lot_id"] == lot_id
        ]

    def save(self, order: Order) -> None:
        def change(rows: list[dict]) -> None:
            if order.id is None:
                order.id = max((o["id"] for o in rows), default=0) + 1
                for item in order.items:
                    item.order_id = order.id
            upsert(rows, self._to_raw(order))

        self._store.update(change)

    def delete(self, order_id: int) -> None:
        self._store.update(lambda rows: remove_where(rows, lambda o: o["id"] == order_id))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer_id": order.customer_id,
            "order_date": order.order_date.isoformat(),
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "total_amount": dump_money(order.total_amount),
            "discount_amount": dump_money(order.discount_amount),
            "is_on_hold": order.is_on_hold,
            "hold_reason": order.hold_reason,
            "held_at": dump_dt(order.held_at),
            "held_by": order.held_by,
            "is_locked": order.is_locked,
            "locked_at": dump_dt(order.locked_at),
            "locked_by": order.locked_by,
            "unlock_deadline": dump_dt(order.unlock_deadline),
            "completed_at": dump_dt(order.completed_at),
            "sold_by": order.sold_by,
            "notes": order.notes,
            "created_by": order.created_by,
            "created_at": dump_dt(order.created_at),
            "updated_at": dump_dt(order.updated_at),
            "restored_item_ids": list(order.restored_item_ids),
            "items": [
                {
                    "id": item.id,
                    "stock_lot_id": item.stock_lot_id,
                    "product_type": item.product_type,
                    "unit": item.unit,
                    "quantity": str(item.quantity.value),
                    "quantity_delivered": str(item.quantity_delivered),
                    "unit_price": dump_money(item.unit_price),
                    "created_at": dump_dt(item.created_at),
                }
                for item in order.items
            ],
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            customer_id=raw["customer_id"],
            order_date=load_date(raw["order_date"]),
            items=[cls._item_to_domain(i, raw["id"]) for i in raw["items"]],
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            total_amount=load_money(raw["total_amount"]),
            discount_amount=load_money(raw["discount_amount"]),
            is_on_hold=raw.get("is_on_hold", False),
            hold_reason=raw.get("hold_reason"),
            held_at=load_dt(raw.get("held_at")),
            held_by=raw.get("held_by"),
            is_locked=raw.get("is_locked", False),
            locked_at=load_dt(raw.get("locked_at")),
            locked_by=raw.get("locked_by"),
            unlock_deadline=load_dt(raw.get("unlock_deadline")),
            completed_at=load_dt(raw.get("completed_at")),
            sold_by=raw.get("sold_by"),
            notes=raw.get("notes"),
            created_by=raw.get("created_by"),
            created_at=load_dt(raw["created_at"]),
            updated_at=load_dt(raw["updated_at"]),
            restored_item_ids=list(raw.get("restored_item_ids", [])),
        )

    @staticmethod
    def _item_to_domain(raw: dict, order_id: int) -> OrderLineItem:
        return OrderLineItem(
            id=raw["id"],
            stock_lot_id=raw["stock_lot_id"],
            product_type=raw["product_type"],
            unit=raw.get("unit", "kg"),
            quantity=Quantity(Decimal(raw["quantity"])),
            quantity_delivered=Decimal(raw["quantity_delivered"]),
            unit_price=load_money(raw["unit_price"]),
            order_id=order_id,
            created_at=load_dt(raw["created_at"]),
        )
