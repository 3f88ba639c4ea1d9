"""Abstract repository for invoice references held against orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Invoice]:
        """Return an order's invoices."""

    @abstractmethod
    def list_all(self) -> list[Invoice]:
        """Return every invoice."""

    @abstractmethod
    def save(self, invoice: Invoice) -> None:
        """Persist an invoice reference."""

    @abstractmethod
    def delete_for_order(self, order_id: int) -> None:
        """Delete an order's invoices; no-op if none exist."""
