"""Application service: Add Stock Lot use case."""

from __future__ import annotations

import logging
from decimal import Decimal

from fgo.domain.model.stock_lot import StockLot
from fgo.domain.model.value_objects import to_decimal
from fgo.domain.repository.stock_lot_repository import StockLotRepository

logger = logging.getLogger(__name__)


class AddStockLotHandler:

    def __init__(self, lot_repo: StockLotRepository) -> None:
        self._lot_repo = lot_repo

    def handle(
        self,
        product_type: str,
        quantity: str | int | Decimal,
        unit: str = "kg",
        batch_reference: str = "",
    ) -> StockLot:
        """Record a freshly produced lot with all of it available."""
        existing = self._lot_repo.list_all()
        numbers = [int(lot.id) for lot in existing if lot.id.isdigit()]
        next_id = str(max(numbers, default=0) + 1)

        lot = StockLot.produce(
            lot_id=next_id,
            product_type=product_type,
            quantity=to_decimal(quantity, "quantity"),
            unit=unit,
            batch_reference=batch_reference,
        )
        self._lot_repo.save(lot)
        logger.info("Added lot %s: %s %s of %s", lot.id, quantity, unit, lot.label)
        return lot
