"""AuditEvent — append-only record of an order lifecycle event."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuditEventType(Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ITEM_ADDED = "ITEM_ADDED"
    ITEM_UPDATED = "ITEM_UPDATED"
    ITEM_DELETED = "ITEM_DELETED"
    DELIVERY_RECORDED = "DELIVERY_RECORDED"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_UPDATED = "PAYMENT_UPDATED"
    PAYMENT_DELETED = "PAYMENT_DELETED"
    STATUS_CHANGED = "STATUS_CHANGED"
    DISCOUNT_APPLIED = "DISCOUNT_APPLIED"
    HOLD_PLACED = "HOLD_PLACED"
    HOLD_REMOVED = "HOLD_REMOVED"
    ORDER_LOCKED = "ORDER_LOCKED"
    ORDER_UNLOCKED = "ORDER_UNLOCKED"
    ORDER_COMPLETED = "ORDER_COMPLETED"


LOCK_EVENTS = (AuditEventType.ORDER_LOCKED, AuditEventType.ORDER_UNLOCKED)


@dataclass(frozen=True)
class AuditEvent:

    id: str
    order_id: int
    event_type: AuditEventType
    actor: str | None
    timestamp: datetime
    detail: str
    data: dict[str, Any] = field(default_factory=dict)
