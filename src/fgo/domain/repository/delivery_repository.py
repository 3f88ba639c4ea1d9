"""Abstract repository for DeliveryDispatch history."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.delivery import DeliveryDispatch


class DeliveryRepository(ABC):

    @abstractmethod
    def add(self, dispatch: DeliveryDispatch) -> None:
        """Append a dispatch record."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[DeliveryDispatch]:
        """Return an order's dispatches, newest delivery first."""

    @abstractmethod
    def list_for_line_item(self, line_item_id: str) -> list[DeliveryDispatch]:
        """Return a line item's dispatches, newest delivery first."""

    @abstractmethod
    def list_all(self) -> list[DeliveryDispatch]:
        """Return every dispatch."""

    @abstractmethod
    def delete_for_order(self, order_id: int) -> None:
        """Delete an order's dispatch history; no-op if none exists."""
