"""JSON-file-backed implementation of DeliveryRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from fgo.domain.model.delivery import DeliveryDispatch
from fgo.domain.repository.delivery_repository import DeliveryRepository
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    dump_dt,
    load_date,
    load_dt,
    remove_where,
)


class JsonDeliveryRepository(DeliveryRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def add(self, dispatch: DeliveryDispatch) -> None:
        self._store.update(lambda rows: rows.append(self._to_raw(dispatch)))

    def list_for_order(self, order_id: int) -> list[DeliveryDispatch]:
        return [d for d in self.list_all() if d.order_id == order_id]

    def list_for_line_item(self, line_item_id: str) -> list[DeliveryDispatch]:
        return [d for d in self.list_all() if d.line_item_id == line_item_id]

    def list_all(self) -> list[DeliveryDispatch]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def delete_for_order(self, order_id: int) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda d: d["order_id"] == order_id)
        )

    @staticmethod
    def _to_raw(dispatch: DeliveryDispatch) -> dict:
        return {
            "id": dispatch.id,
            "order_id": dispatch.order_id,
            "line_item_id": dispatch.line_item_id,
            "stock_lot_id": dispatch.stock_lot_id,
            "quantity_delivered": str(dispatch.quantity_delivered),
            "delivery_date": dispatch.delivery_date.isoformat(),
            "notes": dispatch.notes,
            "created_by": dispatch.created_by,
            "created_at": dump_dt(dispatch.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> DeliveryDispatch:
        return DeliveryDispatch(
            id=raw["id"],
            order_id=raw["order_id"],
            line_item_id=raw["line_item_id"],
            stock_lot_id=raw["stock_lot_id"],
            quantity_delivered=Decimal(raw["quantity_delivered"]),
            delivery_date=load_date(raw["delivery_date"]),
            notes=raw.get("notes"),
            created_by=raw.get("created_by"),
            created_at=load_dt(raw["created_at"]),
        )
