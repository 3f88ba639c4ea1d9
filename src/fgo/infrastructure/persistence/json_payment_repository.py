"""JSON-file-backed implementation of PaymentRepository."""

from __future__ import annotations

from pathlib import Path

from fgo.domain.model.payment import DEFAULT_PAID_TO, Payment, PaymentMode
from fgo.domain.repository.payment_repository import PaymentRepository
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


class JsonPaymentRepository(PaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def get_by_id(self, payment_id: str) -> Payment | None:
        for raw in self._store.load():
            if raw["id"] == payment_id:
                return self._to_domain(raw)
        return None

    def list_for_order(self, order_id: int) -> list[Payment]:
        return [p for p in self.list_all() if p.order_id == order_id]

    def list_all(self) -> list[Payment]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def save(self, payment: Payment) -> None:
        self._store.update(lambda rows: upsert(rows, self._to_raw(payment)))

    def delete(self, payment_id: str) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda p: p["id"] == payment_id)
        )

    def delete_for_order(self, order_id: int) -> None:
        self._store.update(
            lambda rows: remove_where(rows, lambda p: p["order_id"] == order_id)
        )

    @staticmethod
    def _to_raw(payment: Payment) -> dict:
        return {
            "id": payment.id,
            "order_id": payment.order_id,
            "amount_received": dump_money(payment.amount_received),
            "payment_date": payment.payment_date.isoformat(),
            "mode": payment.mode.value,
            "reference": payment.reference,
            "paid_to": payment.paid_to,
            "paid_to_user": payment.paid_to_user,
            "evidence_url": payment.evidence_url,
            "notes": payment.notes,
            "created_by": payment.created_by,
            "created_at": dump_dt(payment.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Payment:
        return Payment(
            id=raw["id"],
            order_id=raw["order_id"],
            amount_received=load_money(raw["amount_received"]),
            payment_date=load_date(raw["payment_date"]),
            mode=PaymentMode(raw["mode"]),
            reference=raw.get("reference"),
            paid_to=raw.get("paid_to") or DEFAULT_PAID_TO,
            paid_to_user=raw.get("paid_to_user"),
            evidence_url=raw.get("evidence_url"),
            notes=raw.get("notes"),
            created_by=raw.get("created_by"),
            created_at=load_dt(raw["created_at"]),
        )
