"""Abstract repository for Reservation records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_line_item(self, line_item_id: str) -> Reservation | None:
        """Return the reservation owned by a line item, or None."""

    @abstractmethod
    def list_for_lot(self, lot_id: str) -> list[Reservation]:
        """Return every reservation placed against a lot."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Reservation]:
        """Return every reservation belonging to an order."""

    @abstractmethod
    def list_all(self) -> list[Reservation]:
        """Return every reservation."""

    @abstractmethod
    def replace(self, reservation: Reservation) -> None:
        """Drop any reservation for the same line item and store this one.

        Both halves happen in one write so the item is never observed
        without a reservation.
        """

    @abstractmethod
    def delete_for_line_item(self, line_item_id: str) -> None:
        """Delete a line item's reservation; no-op if none exists."""

    @abstractmethod
    def delete_for_order(self, order_id: int) -> None:
        """Delete all reservations of an order; no-op if none exist."""
