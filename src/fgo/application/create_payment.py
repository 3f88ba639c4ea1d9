"""Application service: Record Payment use case.

Recording a payment re-derives the order's payment status (and with it
possibly COMPLETED) and mirrors the payment into the accounting ledger.
The mirror is best effort: the payment stands even if it fails.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal

from fgo.application.accounting_mirror import AccountingMirror
from fgo.application.audit_recorder import AuditRecorder
from fgo.application.dto import PaymentDTO
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.application.show_order import payment_to_dto
from fgo.domain.exceptions import ValidationError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.payment import (
    DEFAULT_PAID_TO,
    Payment,
    PaymentMethod,
    mode_for_method,
)
from fgo.domain.model.value_objects import Money
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


def parse_method(value: PaymentMethod | str) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(value.strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(
            f"Unknown payment method '{value}'. Choose one of: {choices}"
        ) from None


class CreatePaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        mirror: AccountingMirror,
        audit: AuditRecorder,
        clock: Clock | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._mirror = mirror
        self._audit = audit
        self._payments = PaymentStatusService(payment_repo)
        self._clock = clock or utcnow

    def handle(
        self,
        order_id: int,
        amount: str | int | Decimal,
        actor: str | None = None,
        method: PaymentMethod | str = PaymentMethod.CASH,
        payment_date: date | None = None,
        reference: str | None = None,
        paid_to: str | None = None,
        paid_to_user: str | None = None,
        evidence_url: str | None = None,
        notes: str | None = None,
    ) -> PaymentDTO:
        order = load_order(self._order_repo, order_id)
        order.ensure_unlocked()

        now = self._clock()
        payment = Payment(
            id=uuid.uuid4().hex,
            order_id=order.id,  # type: ignore[arg-type]
            amount_received=Money.of(amount),
            payment_date=payment_date or now.date(),
            mode=mode_for_method(parse_method(method)),
            reference=reference,
            paid_to=paid_to or DEFAULT_PAID_TO,
            paid_to_user=paid_to_user,
            evidence_url=evidence_url,
            notes=notes,
            created_by=actor,
            created_at=now,
        )
        self._payment_repo.save(payment)
        self._mirror.create_for(payment, order)

        refresh_order(order, self._payments, self._audit, actor, now)
        self._order_repo.save(order)

        self._audit.record(
            order.id, AuditEventType.PAYMENT_RECEIVED, actor,
            f"Received {payment.amount_received} by {payment.mode.value}",
            payment_id=payment.id, amount=payment.amount_received,
            mode=payment.mode, payment_status=order.payment_status,
        )
        logger.info(
            "Recorded payment %s of %s for order %s (%s)",
            payment.id, payment.amount_received, order.order_number,
            order.payment_status.value,
        )
        return payment_to_dto(payment)
