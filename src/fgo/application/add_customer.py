"""Application service: Add Customer use case."""

from __future__ import annotations

from fgo.domain.exceptions import ValidationError
from fgo.domain.model.customer import Customer, CustomerType
from fgo.domain.repository.customer_repository import CustomerRepository


class AddCustomerHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(
        self,
        name: str,
        customer_type: CustomerType | str = CustomerType.DIRECT,
        contact_person: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        notes: str | None = None,
    ) -> Customer:
        """Register a new customer."""
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        if isinstance(customer_type, str):
            customer_type = _parse_type(customer_type)

        # Auto-assign ID based on existing customers
        existing = self._customer_repo.list_all()
        next_id = str(max((int(c.id) for c in existing if c.id.isdigit()), default=0) + 1)

        customer = Customer(
            id=next_id,
            name=name.strip(),
            customer_type=customer_type,
            contact_person=contact_person,
            phone=phone,
            address=address,
            notes=notes,
        )
        self._customer_repo.save(customer)
        return customer


def _parse_type(value: str) -> CustomerType:
    for member in CustomerType:
        if member.value.lower() == value.strip().lower():
            return member
    choices = ", ".join(m.value for m in CustomerType)
    raise ValidationError(f"Unknown customer type '{value}'. Choose one of: {choices}")
