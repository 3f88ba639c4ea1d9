"""Abstract source of human-readable order numbers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OrderNumberGenerator(ABC):

    @abstractmethod
    def next_number(self) -> str:
        """Return the next unused order number, e.g. ``ORD-000123``."""
