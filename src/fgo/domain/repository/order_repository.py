"""Abstract repository for Order aggregate (orders own their line items)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.order import Order, OrderLineItem


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_line_item_id(self, item_id: str) -> Order | None:
        """Return the order owning a line item, or None."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def list_items_for_lot(self, lot_id: str) -> list[OrderLineItem]:
        """Return every line item, across all orders, drawn from a lot."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, assigning an ID if needed."""

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """Remove an order and its line items; no-op if already gone."""
