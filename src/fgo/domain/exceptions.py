"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderLockedError(DomainException):
    """A mutation was attempted on a locked order."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order {order_number} is locked and cannot be modified")
        self.order_number = order_number


class InsufficientInventoryError(ValidationError):
    """Requested quantity exceeds the computed availability of a lot."""

    def __init__(self, shortfalls: list[str]) -> None:
        super().__init__("Insufficient inventory: " + "; ".join(shortfalls))
        self.shortfalls = shortfalls


class InvalidDeliveryRangeError(ValidationError):
    """Delivered quantity outside ``[0, item quantity]``."""


class DeliveredItemImmutableError(ValidationError):
    """A line item with deliveries can only receive further deliveries."""


class QuantityBelowDeliveredError(ValidationError):
    """A line item quantity cannot drop below what was already delivered."""


class AlreadyOnHoldError(ValidationError):
    pass


class NotOnHoldError(ValidationError):
    pass


class AlreadyLockedError(ValidationError):
    pass


class NotLockedError(ValidationError):
    pass


class OrderNotCompletedError(ValidationError):
    """Only completed orders can be locked."""


class UnlockWindowExpiredError(ValidationError):
    """The grace period for unlocking has lapsed."""


class InvalidManualTransitionError(ValidationError):
    """COMPLETED is derived from payments and cannot be set by hand."""


class DeletionCancelledError(DomainException):
    """The caller declined the deletion confirmation."""


class PartialCompletionError(DomainException):
    """A step of a multi-step write sequence failed.

    Earlier steps stay committed.  Every step is safe to re-run, so the
    caller should retry the operation or reconcile manually.
    """

    operation = "update"

    def __init__(self, step: str, order_id: int | None, cause: Exception) -> None:
        target = f"order #{order_id}" if order_id is not None else "order"
        super().__init__(
            f"Failed to {self.operation} {target} at step '{step}': {cause}. "
            f"Earlier steps may have completed; retry or reconcile."
        )
        self.step = step
        self.order_id = order_id


class OrderCreationStepError(PartialCompletionError):
    operation = "create"


class DeletionStepError(PartialCompletionError):
    operation = "delete"


class DeliveryStepError(PartialCompletionError):
    operation = "record delivery for"
