"""DeliveryDispatch — append-only record of one delivery event.

The cumulative ``quantity_delivered`` on the line item is the source of
truth; dispatches are the history of how it got there.  A dispatch's
quantity is the change recorded by that event and may be negative when
a delivery was corrected downwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal


@dataclass(frozen=True)
class DeliveryDispatch:

    id: str
    order_id: int
    line_item_id: str
    stock_lot_id: str
    quantity_delivered: Decimal
    delivery_date: date
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
