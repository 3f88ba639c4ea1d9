"""Abstract repository for StockLot aggregate and its waste records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from fgo.domain.model.stock_lot import StockLot, WasteRecord


class StockLotRepository(ABC):

    @abstractmethod
    def get_by_id(self, lot_id: str) -> StockLot | None:
        """Return a lot by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[StockLot]:
        """Return every lot."""

    @abstractmethod
    def save(self, lot: StockLot) -> None:
        """Persist a new or updated lot."""

    @abstractmethod
    def adjust_available(self, lot_id: str, delta: Decimal) -> StockLot:
        """Atomically add *delta* to the lot's available counter.

        The result is clamped to ``[0, quantity_created]`` as part of the
        same write.  Implementations must not read the lot, release
        control, and write back a value computed earlier.
        Raises EntityNotFoundError for an unknown lot.
        """

    @abstractmethod
    def add_waste(self, record: WasteRecord) -> None:
        """Append a waste record."""

    @abstractmethod
    def total_wasted(self, lot_id: str) -> Decimal:
        """Sum of all waste recorded against a lot."""
