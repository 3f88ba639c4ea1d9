"""JSON-file-backed implementation of InvoiceRepository."""

from __future__ import annotations

from pathlib import Path

from fgo.domain.model.invoice import Invoice
from fgo.domain.repository.invoice_repository import InvoiceRepository
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    load_date,
    remove_where,
    upsert,
)


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def list_for_order(self, order_id: int) -> list[Invoice]:
        return [i for i in self.list_all() if i.order_id == order_id]

    def list_all(self) -> list[Invoice]:
        return [
            Invoice(
                id=raw["id"],
                invoice_number=raw["invoice_number"],
                order_id=raw["order_id"],
                invoice_date=load_date(raw["invoice_date"]),
            )
            for raw in self._store.load()
        ]

    def save(self, invoice: Invoice) -> None:
        raw = {
            "id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "order_id": invoice.order_id,
            "invoice_date": invoice.invoice_date.isoformat(),
        }
        self._store.update(lambda rows: upsert(rows, raw))

    def delete_for_order(self, order_id: int) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda i: i["order_id"] == order_id)
        )
