"""Abstract repository for Payment records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    def get_by_id(self, payment_id: str) -> Payment | None:
        """Return a payment by its ID, or None if not found."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Payment]:
        """Return an order's payments, newest first."""

    @abstractmethod
    def list_all(self) -> list[Payment]:
        """Return every payment, newest first."""

    @abstractmethod
    def save(self, payment: Payment) -> None:
        """Persist a new or updated payment."""

    @abstractmethod
    def delete(self, payment_id: str) -> None:
        """Delete a payment; no-op if already gone."""

    @abstractmethod
    def delete_for_order(self, order_id: int) -> None:
        """Delete all payments of an order; no-op if none exist."""
