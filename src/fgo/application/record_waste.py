"""Application service: Record Waste use case.

Waste is bounded by what the lot still displays as available.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from fgo.application.order_support import Clock, utcnow
from fgo.domain.exceptions import EntityNotFoundError, ValidationError
from fgo.domain.model.stock_lot import WasteRecord
from fgo.domain.model.value_objects import ZERO, to_decimal
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = logging.getLogger(__name__)


class RecordWasteHandler:

    def __init__(
        self,
        lot_repo: StockLotRepository,
        reservations: InventoryReservationService,
        clock: Clock | None = None,
    ) -> None:
        self._lot_repo = lot_repo
        self._reservations = reservations
        self._clock = clock or utcnow

    def handle(
        self,
        lot_id: str,
        quantity: str | int | Decimal,
        reason: str,
        actor: str | None = None,
    ) -> WasteRecord:
        lot = self._lot_repo.get_by_id(lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{lot_id}' not found")
        if not reason or not reason.strip():
            raise ValidationError("Waste reason is required")
        wasted = to_decimal(quantity, "waste quantity")
        if wasted <= ZERO:
            raise ValidationError("Waste quantity must be positive")
        available = self._reservations.display_available(lot_id)
        if wasted > available:
            raise ValidationError(
                f"Cannot waste {wasted:f} {lot.unit} of {lot.label}; "
                f"only {available:f} {lot.unit} available"
            )

        record = WasteRecord(
            id=uuid.uuid4().hex,
            stock_lot_id=lot.id,
            quantity_wasted=wasted,
            reason=reason.strip(),
            recorded_by=actor,
            recorded_at=self._clock(),
        )
        self._lot_repo.add_waste(record)
        logger.info("Recorded %s %s waste on lot %s", wasted, lot.unit, lot.label)
        return record
