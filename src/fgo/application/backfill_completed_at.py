"""Application service: fill in a missing completion time.

Orders completed before ``completed_at`` was recorded get their last
update time instead.
"""

from __future__ import annotations

import logging

from fgo.domain.model.order import OrderStatus
from fgo.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class BackfillCompletedAtHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> bool:
        """Returns True when the order was changed. Never raises."""
        try:
            order = self._order_repo.get_by_id(order_id)
            if (
                order is None
                or order.status is not OrderStatus.COMPLETED
                or order.completed_at is not None
            ):
                return False
            order.completed_at = order.updated_at
            self._order_repo.save(order)
        except Exception:
            logger.exception("Could not backfill completed_at for order #%s", order_id)
            return False
        logger.info("Backfilled completed_at for order %s", order.order_number)
        return True
