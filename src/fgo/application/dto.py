"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: a quantity of one stock lot at a unit price."""

    stock_lot_id: str
    quantity: str | int | Decimal
    unit_price: str | int | Decimal


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: str
    stock_lot_id: str
    product_type: str
    quantity: Decimal
    quantity_delivered: Decimal
    remaining_quantity: Decimal
    unit: str
    unit_price: str  # formatted, e.g. "INR 15.00"
    line_total: str


@dataclass(frozen=True)
class PaymentDTO:

    id: str
    order_id: int
    amount_received: str
    payment_date: date
    mode: str
    reference: str | None
    paid_to: str
    notes: str | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    customer_id: str
    customer_name: str | None
    order_date: date
    status: str
    display_status: str  # HOLD while on hold, otherwise ``status``
    payment_status: str
    items: list[OrderLineItemDTO]
    total: str
    discount: str
    net_total: str
    total_paid: str
    outstanding: str
    is_on_hold: bool
    hold_reason: str | None
    is_locked: bool
    unlock_deadline: datetime | None
    completed_at: datetime | None
    created_at: str
    payments: list[PaymentDTO] = field(default_factory=list)

    @property
    def has_deliveries(self) -> bool:
        return any(item.quantity_delivered > 0 for item in self.items)


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one row of the extended order listing, with computed tags."""

    id: int
    order_number: str
    customer_id: str
    customer_name: str | None
    customer_type: str | None
    order_date: date
    display_status: str
    payment_status: str
    total: str
    total_paid: Decimal
    is_locked: bool
    product_types: list[str]
    batch_references: list[str]
    payment_modes: list[str]


@dataclass(frozen=True)
class OrderFilter:
    """Input: criteria for the extended order listing. ``None`` matches all."""

    display_status: str | None = None
    payment_status: str | None = None
    customer_id: str | None = None
    customer_type: str | None = None
    product_type: str | None = None
    payment_mode: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None


@dataclass(frozen=True)
class PaymentStatusDTO:

    order_id: int
    payment_status: str
    net_total: Decimal
    total_paid: Decimal
    outstanding: Decimal


@dataclass(frozen=True)
class LockInfoDTO:

    order_id: int
    order_number: str
    is_locked: bool
    locked_at: datetime | None
    locked_by: str | None
    unlock_deadline: datetime | None
    time_remaining: timedelta | None
    can_unlock: bool


@dataclass(frozen=True)
class DeliveryResultDTO:

    line_item_id: str
    quantity_delivered: Decimal
    change: Decimal
    lot_quantity_available: Decimal


@dataclass(frozen=True)
class StockLineDTO:

    lot_id: str
    product_type: str
    batch_reference: str
    unit: str
    created: Decimal
    counter: Decimal
    wasted: Decimal
    display_available: Decimal
    available_for_sale: Decimal


@dataclass(frozen=True)
class DeletionPreview:
    """What deleting an order will undo, shown before asking to confirm."""

    order_id: int
    order_number: str
    delivered: list[tuple[str, Decimal, str]]  # (product type, quantity, unit)
    payment_count: int
    total_paid: Decimal
    invoice_count: int

    @property
    def has_side_effects(self) -> bool:
        return bool(self.delivered) or self.payment_count > 0 or self.invoice_count > 0


@dataclass(frozen=True)
class ReconciliationReport:
    """Rows that reference an order (or line item) that no longer exists."""

    reservations: list[str]
    dispatches: list[str]
    payments: list[str]
    accounting_entries: list[str]
    invoices: list[str]
    purged: bool = False

    @property
    def total(self) -> int:
        return (
            len(self.reservations) + len(self.dispatches) + len(self.payments)
            + len(self.accounting_entries) + len(self.invoices)
        )
