"""Customer aggregate.

Customers are referenced by orders but otherwise live on their own.
Only creation and lookup are needed here; customers are never deleted,
they are marked Inactive instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fgo.domain.exceptions import ValidationError


class CustomerType(Enum):
    HOTEL = "Hotel"
    RESTAURANT = "Restaurant"
    RETAIL = "Retail"
    DIRECT = "Direct"
    OTHER = "Other"


class CustomerStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


@dataclass
class Customer:

    id: str
    name: str
    customer_type: CustomerType
    status: CustomerStatus = CustomerStatus.ACTIVE
    contact_person: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Customer name is required")
