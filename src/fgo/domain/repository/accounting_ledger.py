"""Abstract accounting collaborator that mirrors payments as income.

Defined in the domain layer so payment handlers can keep the mirror in
step without knowing how the accounting side stores its entries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.payment import AccountingEntry


class AccountingLedger(ABC):

    @abstractmethod
    def find_for_payment(self, payment_id: str) -> AccountingEntry | None:
        """Return the entry linked to a payment, or None."""

    @abstractmethod
    def list_all(self) -> list[AccountingEntry]:
        """Return every entry."""

    @abstractmethod
    def save(self, entry: AccountingEntry) -> None:
        """Persist a new or updated entry."""

    @abstractmethod
    def delete_for_order(self, order_id: int) -> None:
        """Delete entries tied to an order's payments; no-op if none."""
