"""StockLot aggregate — a produced batch of a finished good.

``quantity_created`` is fixed at production time. ``quantity_available``
is a denormalized running counter: deliveries decrement it and order
deletion restores it.  Reservations never touch the counter; they are
subtracted when availability is computed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from fgo.domain.exceptions import ValidationError
from fgo.domain.model.value_objects import ZERO


@dataclass
class StockLot:
    """Aggregate root for a stocked lot.

    Invariants:
    - ``0 <= quantity_available <= quantity_created``
    """

    id: str
    product_type: str
    quantity_created: Decimal
    quantity_available: Decimal
    unit: str = "kg"
    batch_reference: str = ""

    def __post_init__(self) -> None:
        if self.quantity_created < ZERO:
            raise ValidationError("Produced quantity cannot be negative")
        if not ZERO <= self.quantity_available <= self.quantity_created:
            raise ValidationError(
                f"Available quantity {self.quantity_available} for lot "
                f"{self.label} must be between 0 and {self.quantity_created}"
            )

    @staticmethod
    def produce(
        lot_id: str,
        product_type: str,
        quantity: Decimal,
        unit: str = "kg",
        batch_reference: str = "",
    ) -> StockLot:
        """Create a freshly produced lot with everything available."""
        if not product_type or not product_type.strip():
            raise ValidationError("Product type is required")
        if quantity <= ZERO:
            raise ValidationError("Produced quantity must be positive")
        return StockLot(
            id=lot_id,
            product_type=product_type.strip(),
            quantity_created=quantity,
            quantity_available=quantity,
            unit=unit,
            batch_reference=batch_reference,
        )

    @property
    def label(self) -> str:
        if self.batch_reference:
            return f"{self.product_type} ({self.batch_reference})"
        return self.product_type

    def adjust_available(self, delta: Decimal) -> Decimal:
        """Apply *delta* to the counter, clamped to ``[0, quantity_created]``.

        Returns the delta actually applied.  Repositories call this inside
        their atomic update so the clamp and the write happen together.
        """
        target = self.quantity_available + delta
        clamped = min(max(target, ZERO), self.quantity_created)
        applied = clamped - self.quantity_available
        self.quantity_available = clamped
        return applied


@dataclass(frozen=True)
class WasteRecord:
    """Quantity of a lot written off (spoiled, damaged, sampled)."""

    id: str
    stock_lot_id: str
    quantity_wasted: Decimal
    reason: str
    recorded_by: str | None = None
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
