"""Application services: customer queries."""

from __future__ import annotations

from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.customer import Customer, CustomerStatus
from fgo.domain.repository.customer_repository import CustomerRepository


class ShowCustomerHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, customer_id: str) -> Customer:
        customer = self._customer_repo.get_by_id(customer_id)
        if customer is None:
            raise EntityNotFoundError(f"Customer '{customer_id}' not found")
        return customer


class ListCustomersHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, include_inactive: bool = False) -> list[Customer]:
        customers = self._customer_repo.list_all()
        if not include_inactive:
            customers = [c for c in customers if c.status is CustomerStatus.ACTIVE]
        return sorted(customers, key=lambda c: c.name.lower())
