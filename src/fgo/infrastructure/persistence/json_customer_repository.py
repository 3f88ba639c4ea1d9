"""JSON-file-backed implementation of CustomerRepository."""

from __future__ import annotations

from pathlib import Path

from fgo.domain.model.customer import Customer, CustomerStatus, CustomerType
from fgo.domain.repository.customer_repository import CustomerRepository
from fgo.infrastructure.persistence.json_store import JsonFileStore, upsert


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def get_by_id(self, customer_id: str) -> Customer | None:
        for raw in self._store.load():
            if raw["id"] == customer_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Customer]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def save(self, customer: Customer) -> None:
        raw = {
            "id": customer.id,
            "name": customer.name,
            "customer_type": customer.customer_type.value,
            "status": customer.status.value,
            "contact_person": customer.contact_person,
            "phone": customer.phone,
            "address": customer.address,
            "notes": customer.notes,
        }
        self._store.update(lambda rows: upsert(rows, raw))

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            name=raw["name"],
            customer_type=CustomerType(raw["customer_type"]),
            status=CustomerStatus(raw.get("status", "Active")),
            contact_person=raw.get("contact_person"),
            phone=raw.get("phone"),
            address=raw.get("address"),
            notes=raw.get("notes"),
        )
