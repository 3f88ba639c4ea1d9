"""JSON-file-backed implementation of StockLotRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.stock_lot import StockLot, WasteRecord
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    dump_dt,
    upsert,
)


class JsonStockLotRepository(StockLotRepository):

    def __init__(self, file_path: Path, waste_path: Path) -> None:
        self._store = JsonFileStore(file_path)
        self._waste = JsonFileStore(waste_path)

    # --- StockLotRepository interface -----------------------------------------

    def get_by_id(self, lot_id: str) -> StockLot | None:
        for raw in self._store.load():
            if raw["id"] == lot_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[StockLot]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def save(self, lot: StockLot) -> None:
        self._store.update(lambda rows: upsert(rows, self._to_raw(lot)))

    def adjust_available(self, lot_id: str, delta: Decimal) -> StockLot:
        def change(rows: list[dict]) -> StockLot:
            for i, raw in enumerate(rows):
                if raw["id"] == lot_id:
                    lot = self._to_domain(raw)
                    lot.adjust_available(delta)
                    rows[i] = self._to_raw(lot)
                    return lot
            raise EntityNotFoundError(f"Stock lot '{lot_id}' not found")

        return self._store.update(change)

    def add_waste(self, record: WasteRecord) -> None:
        self._waste.update(lambda rows: rows.append(self._waste_to_raw(record)))

    def total_wasted(self, lot_id: str) -> Decimal:
        return sum(
            (Decimal(raw["quantity_wasted"]) for raw in self._waste.load()
             if raw["stock_lot_id"] == lot_id),
            ZERO,
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(lot: StockLot) -> dict:
        return {
            "id": lot.id,
            "product_type": lot.product_type,
            "unit": lot.unit,
            "quantity_created": str(lot.quantity_created),
            "quantity_available": str(lot.quantity_available),
            "batch_reference": lot.batch_reference,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockLot:
        return StockLot(
            id=raw["id"],
            product_type=raw["product_type"],
            unit=raw.get("unit", "kg"),
            quantity_created=Decimal(raw["quantity_created"]),
            quantity_available=Decimal(raw["quantity_available"]),
            batch_reference=raw.get("batch_reference", ""),
        )

    @staticmethod
    def _waste_to_raw(record: WasteRecord) -> dict:
        return {
            "id": record.id,
            "stock_lot_id": record.stock_lot_id,
            "quantity_wasted": str(record.quantity_wasted),
            "reason": record.reason,
            "recorded_by": record.recorded_by,
            "recorded_at": dump_dt(record.recorded_at),
        }

