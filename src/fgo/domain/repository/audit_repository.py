"""Abstract append-only store for AuditEvent records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fgo.domain.model.audit import AuditEvent


class AuditRepository(ABC):

    @abstractmethod
    def append(self, event: AuditEvent) -> None:
        """Append an event. Events are never updated or removed."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[AuditEvent]:
        """Return an order's events, oldest first."""
