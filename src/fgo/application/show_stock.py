"""Application service: Show Stock use case (query).

Lists every lot with both availability figures side by side.
"""

from __future__ import annotations

from fgo.application.dto import StockLineDTO
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ShowStockHandler:

    def __init__(
        self,
        lot_repo: StockLotRepository,
        reservations: InventoryReservationService,
    ) -> None:
        self._lot_repo = lot_repo
        self._reservations = reservations

    def handle(self) -> list[StockLineDTO]:
        return [
            StockLineDTO(
                lot_id=lot.id,
                product_type=lot.product_type,
                batch_reference=lot.batch_reference,
                unit=lot.unit,
                created=lot.quantity_created,
                counter=lot.quantity_available,
                wasted=self._lot_repo.total_wasted(lot.id),
                display_available=self._reservations.display_available(lot.id),
                available_for_sale=self._reservations.available_for_sale(lot.id),
            )
            for lot in self._lot_repo.list_all()
        ]
