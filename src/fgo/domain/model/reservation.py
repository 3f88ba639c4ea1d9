"""Reservation — stock held against a lot by one order line item.

A reservation is owned by its line item: there is at most one per item,
and it is replaced or removed whenever the item changes.  It counts
against a lot's availability while the owning order is not COMPLETED.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


@dataclass(frozen=True)
class Reservation:

    id: str
    order_id: int
    line_item_id: str
    stock_lot_id: str
    quantity_reserved: Decimal
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
