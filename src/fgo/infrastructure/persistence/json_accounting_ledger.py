"""JSON-file-backed implementation of AccountingLedger."""

from __future__ import annotations

from pathlib import Path

from fgo.domain.model.payment import AccountingEntry, PaymentMethod
from fgo.domain.repository.accounting_ledger import AccountingLedger
from fgo.infrastructure.persistence.json_store import (
    JsonFileStore,
    dump_money,
    load_date,
    load_money,
    remove_where,
    upsert,
)


class JsonAccountingLedger(AccountingLedger):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def find_for_payment(self, payment_id: str) -> AccountingEntry | None:
        for entry in self.list_all():
            if entry.payment_id == payment_id:
                return entry
        return None

    def list_all(self) -> list[AccountingEntry]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def save(self, entry: AccountingEntry) -> None:
        self._store.update(lambda rows: upsert(rows, self._to_raw(entry)))

    def delete_for_order(self, order_id: int) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda e: e["order_id"] == order_id)
        )

    @staticmethod
    def _to_raw(entry: AccountingEntry) -> dict:
        return {
            "id": entry.id,
            "payment_id": entry.payment_id,
            "order_id": entry.order_id,
            "amount": dump_money(entry.amount),
            "payment_date": entry.payment_date.isoformat(),
            "method": entry.method.value,
            "reference": entry.reference,
            "paid_to": entry.paid_to,
            "paid_to_user": entry.paid_to_user,
            "reason": entry.reason,
            "description": entry.description,
            "source": entry.source,
        }

    @staticmethod
    def _to_domain(raw: dict) -> AccountingEntry:
        return AccountingEntry(
            id=raw["id"],
            payment_id=raw["payment_id"],
            order_id=raw["order_id"],
            amount=load_money(raw["amount"]),
            payment_date=load_date(raw["payment_date"]),
            method=PaymentMethod(raw["method"]),
            reference=raw.get("reference"),
            paid_to=raw["paid_to"],
            paid_to_user=raw.get("paid_to_user"),
            reason=raw["reason"],
            description=raw["description"],
            source=raw["source"],
        )
