"""Invoice reference kept against an order.

Invoice documents are produced elsewhere; this engine only needs to know
an order's invoices exist so it can remove them when the order goes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Invoice:

    id: str
    invoice_number: str
    order_id: int
    invoice_date: date
