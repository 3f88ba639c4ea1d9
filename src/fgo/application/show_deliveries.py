"""Application service: Show Deliveries use case (query)."""

from __future__ import annotations

from fgo.domain.exceptions import ValidationError
from fgo.domain.model.delivery import DeliveryDispatch
from fgo.domain.repository.delivery_repository import DeliveryRepository


class ShowDeliveriesHandler:

    def __init__(self, delivery_repo: DeliveryRepository) -> None:
        self._delivery_repo = delivery_repo

    def handle(
        self, order_id: int | None = None, line_item_id: str | None = None
    ) -> list[DeliveryDispatch]:
        """Dispatch history for an order or one of its items, newest first."""
        if line_item_id is not None:
            dispatches = self._delivery_repo.list_for_line_item(line_item_id)
        elif order_id is not None:
            dispatches = self._delivery_repo.list_for_order(order_id)
        else:
            raise ValidationError("Give an order or a line item")
        return sorted(
            dispatches, key=lambda d: (d.delivery_date, d.created_at), reverse=True
        )
