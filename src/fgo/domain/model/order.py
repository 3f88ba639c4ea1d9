"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  It carries two
orthogonal flags on top of its status: a manual *hold* and a manual
*lock*.  A locked order rejects every mutation except unlock, and unlock
is only possible inside a grace window that starts when the lock is set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

from fgo.domain.exceptions import (
    AlreadyLockedError,
    AlreadyOnHoldError,
    EntityNotFoundError,
    InvalidDeliveryRangeError,
    InvalidManualTransitionError,
    NotLockedError,
    NotOnHoldError,
    OrderLockedError,
    OrderNotCompletedError,
    UnlockWindowExpiredError,
    ValidationError,
)
from fgo.domain.model.value_objects import ZERO, Money, Quantity


class OrderStatus(Enum):
    CREATED = "CREATED"
    READY_FOR_PAYMENT = "READY_FOR_PAYMENT"
    COMPLETED = "COMPLETED"


class PaymentStatus(Enum):
    READY_FOR_PAYMENT = "READY_FOR_PAYMENT"
    PARTIAL_PAYMENT = "PARTIAL_PAYMENT"
    FULL_PAYMENT = "FULL_PAYMENT"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
UNLOCK_WINDOW = timedelta(days=7)
MANUAL_STATUSES = (OrderStatus.CREATED, OrderStatus.READY_FOR_PAYMENT)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderLineItem:
    """A quantity of one stock lot sold at a fixed unit price.

    Once anything has been delivered the item is frozen: only
    ``set_delivered()`` may change it.
    """

    id: str
    stock_lot_id: str
    product_type: str
    quantity: Quantity
    unit_price: Money
    unit: str = "kg"
    quantity_delivered: Decimal = ZERO
    order_id: int | None = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def remaining_quantity(self) -> Decimal:
        return self.quantity.value - self.quantity_delivered

    @property
    def has_deliveries(self) -> bool:
        return self.quantity_delivered > ZERO

    def set_delivered(self, new_delivered: Decimal) -> Decimal:
        """Set the cumulative delivered quantity and return the change.

        A negative change is accepted; giving the difference back to the
        stock lot is not this method's concern.
        """
        if new_delivered < ZERO or new_delivered > self.quantity.value:
            raise InvalidDeliveryRangeError(
                f"Delivery quantity must be between 0 and {self.quantity} {self.unit}"
            )
        delta = new_delivered - self.quantity_delivered
        self.quantity_delivered = new_delivered
        return delta


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders.  The ``__init__``
    is intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    order_number: str
    customer_id: str
    order_date: date
    items: list[OrderLineItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.CREATED
    payment_status: PaymentStatus = PaymentStatus.READY_FOR_PAYMENT
    total_amount: Money = field(default_factory=Money.zero)
    discount_amount: Money = field(default_factory=Money.zero)
    # hold
    is_on_hold: bool = False
    hold_reason: str | None = None
    held_at: datetime | None = None
    held_by: str | None = None
    # lock
    is_locked: bool = False
    locked_at: datetime | None = None
    locked_by: str | None = None
    unlock_deadline: datetime | None = None
    completed_at: datetime | None = None
    sold_by: str | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    # line items whose deliveries were already returned to stock by a
    # deletion attempt; keeps a retried deletion from restoring twice
    restored_item_ids: list[str] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer_id: str,
        order_date: date,
        created_by: str | None = None,
        sold_by: str | None = None,
        notes: str | None = None,
    ) -> Order:
        if not customer_id or not str(customer_id).strip():
            raise ValidationError("Customer is required")
        now = _utcnow()
        return Order(
            id=None,
            order_number=order_number,
            customer_id=str(customer_id).strip(),
            order_date=order_date,
            sold_by=sold_by,
            notes=notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

    # --- Guards ---------------------------------------------------------------

    def ensure_unlocked(self) -> None:
        if self.is_locked:
            raise OrderLockedError(self.order_number)

    # --- Line items -----------------------------------------------------------

    def add_item(self, item: OrderLineItem) -> None:
        self.ensure_unlocked()
        item.order_id = self.id
        self.items.append(item)
        self.recompute_total()

    def find_item(self, item_id: str) -> OrderLineItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(
            f"Line item '{item_id}' not found in order {self.order_number}"
        )

    def remove_item(self, item_id: str) -> OrderLineItem:
        self.ensure_unlocked()
        item = self.find_item(item_id)
        self.items.remove(item)
        self.recompute_total()
        return item

    def recompute_total(self) -> None:
        """Sum of line totals; the discount is kept separately."""
        total = Money.zero()
        for item in self.items:
            total = total + item.line_total
        self.total_amount = total

    @property
    def net_total(self) -> Decimal:
        return self.total_amount.amount - self.discount_amount.amount

    @property
    def has_deliveries(self) -> bool:
        return any(item.has_deliveries for item in self.items)

    def apply_discount(self, amount: Money) -> None:
        self.ensure_unlocked()
        if amount > self.total_amount:
            raise ValidationError(
                f"Discount {amount} cannot exceed the order total {self.total_amount}"
            )
        self.discount_amount = amount

    # --- Status ---------------------------------------------------------------

    def set_status(self, status: OrderStatus) -> None:
        """Manual transition between CREATED and READY_FOR_PAYMENT."""
        self.ensure_unlocked()
        if status not in MANUAL_STATUSES:
            raise InvalidManualTransitionError(
                f"{status.value} cannot be set manually; it is derived from full payment"
            )
        self.status = status

    def refresh_status(
        self, payment_status: PaymentStatus, now: datetime | None = None
    ) -> OrderStatus:
        """Re-derive status from payments, hold flag and items.

        COMPLETED requires full payment and no hold.  Otherwise an order
        with items is READY_FOR_PAYMENT and an empty one is CREATED.
        Returns the status held before the refresh.
        """
        previous = self.status
        self.payment_status = payment_status
        if payment_status is PaymentStatus.FULL_PAYMENT and not self.is_on_hold:
            self.status = OrderStatus.COMPLETED
            if self.completed_at is None:
                self.completed_at = now or _utcnow()
        elif self.items:
            self.status = OrderStatus.READY_FOR_PAYMENT
        else:
            self.status = OrderStatus.CREATED
        return previous

    # --- Hold -----------------------------------------------------------------

    def place_hold(self, reason: str, actor: str | None, now: datetime) -> None:
        self.ensure_unlocked()
        if not reason or not reason.strip():
            raise ValidationError("Hold reason is required")
        if self.is_on_hold:
            raise AlreadyOnHoldError(f"Order {self.order_number} is already on hold")
        self.is_on_hold = True
        self.hold_reason = reason.strip()
        self.held_at = now
        self.held_by = actor

    def remove_hold(self) -> None:
        self.ensure_unlocked()
        if not self.is_on_hold:
            raise NotOnHoldError(f"Order {self.order_number} is not on hold")
        self.is_on_hold = False
        self.hold_reason = None
        self.held_at = None
        self.held_by = None

    # --- Lock -----------------------------------------------------------------

    def lock(
        self, actor: str | None, now: datetime, window: timedelta = UNLOCK_WINDOW
    ) -> None:
        if self.is_locked:
            raise AlreadyLockedError(f"Order {self.order_number} is already locked")
        if self.status is not OrderStatus.COMPLETED:
            raise OrderNotCompletedError(
                f"Only completed orders can be locked; order {self.order_number} "
                f"is {self.status.value}"
            )
        self.is_locked = True
        self.locked_at = now
        self.locked_by = actor
        self.unlock_deadline = now + window

    def unlock(self, reason: str, now: datetime) -> None:
        if not reason or not reason.strip():
            raise ValidationError("Unlock reason is required")
        if not self.is_locked:
            raise NotLockedError(f"Order {self.order_number} is not locked")
        if self.unlock_deadline is None or now > self.unlock_deadline:
            raise UnlockWindowExpiredError(
                f"Unlock window for order {self.order_number} has expired; "
                f"the order is permanently locked"
            )
        self.is_locked = False
        self.locked_at = None
        self.locked_by = None
        self.unlock_deadline = None

    def can_unlock(self, now: datetime) -> bool:
        return (
            self.is_locked
            and self.unlock_deadline is not None
            and now <= self.unlock_deadline
        )

    def unlock_time_remaining(self, now: datetime) -> timedelta | None:
        """Time left to unlock; zero once lapsed, None when not locked."""
        if not self.is_locked or self.unlock_deadline is None:
            return None
        return max(self.unlock_deadline - now, timedelta(0))

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or _utcnow()
