"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from pathlib import Path

from fgo.domain.model.reservation import Reservation
from fgo.domain.repository.reservation_repository import ReservationRepository
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    dump_dt,
    load_dt,
    remove_where,
)


class JsonReservationRepository(ReservationRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def get_by_line_item(self, line_item_id: str) -> Reservation | None:
        for raw in self._store.load():
            if raw["line_item_id"] == line_item_id:
                return self._to_domain(raw)
        return None

    def list_for_lot(self, lot_id: str) -> list[Reservation]:
        return self._where(lambda r: r["stock_lot_id"] == lot_id)

    def list_for_order(self, order_id: int) -> list[Reservation]:
        return self._where(lambda r: r["order_id"] == order_id)

    def list_all(self) -> list[Reservation]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def replace(self, reservation: Reservation) -> None:
        def change(rows: list[dict]) -> None:
            remove_where(rows, lambda r: r["line_item_id"] == reservation.line_item_id)
            rows.append(self._to_raw(reservation))

        self._store.update(change)

    def delete_for_line_item(self, line_item_id: str) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda r: r["line_item_id"] == line_item_id)
        )

    def delete_for_order(self, order_id: int) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda r: r["order_id"] == order_id)
        )

    def _where(self, predicate: Callable[[dict], bool]) -> list[Reservation]:
        return [self._to_domain(raw) for raw in self._store.load() if predicate(raw)]

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "order_id": reservation.order_id,
            "line_item_id": reservation.line_item_id,
            "stock_lot_id": reservation.stock_lot_id,
            "quantity_reserved": str(reservation.quantity_reserved),
            "created_at": dump_dt(reservation.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            order_id=raw["order_id"],
            line_item_id=raw["line_item_id"],
            stock_lot_id=raw["stock_lot_id"],
            quantity_reserved=Decimal(raw["quantity_reserved"]),
            created_at=load_dt(raw["created_at"]),
        )
