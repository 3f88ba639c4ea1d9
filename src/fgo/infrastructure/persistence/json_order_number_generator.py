"""Sequence-file implementation of OrderNumberGenerator.

The last issued sequence value is kept in a small JSON document.  If the
file cannot be read or written the next number is worked out from the
highest number among existing orders instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fgo.domain.repository.order_number_generator import OrderNumberGenerator
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.service.order_numbers import format_order_number, next_after
from fgo.infrastructure.persistence.json_store import JsonFileStore

logger = logging.getLogger(__name__)


class JsonOrderNumberGenerator(OrderNumberGenerator):

    def __init__(self, file_path: Path, order_repo: OrderRepository) -> None:
        self._store = JsonFileStore(file_path, empty={"last": 0})
        self._order_repo = order_repo

    def next_number(self) -> str:
        try:
            return self._store.update(self._advance)
        except Exception:
            logger.warning(
                "Order number sequence at %s unusable; scanning existing orders",
                self._store.path, exc_info=True,
            )
            return next_after(o.order_number for o in self._order_repo.list_all())

    @staticmethod
    def _advance(sequence: dict) -> str:
        sequence["last"] = int(sequence["last"]) + 1
        return format_order_number(sequence["last"])
