"""Application service: Update Payment use case."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from decimal import Decimal

from fgo.application.accounting_mirror import AccountingMirror
from fgo.application.audit_recorder import AuditRecorder
from fgo.application.create_payment import parse_method
from fgo.application.dto import PaymentDTO
from fgo.application.order_support import Clock, load_order, refresh_order, utcnow
from fgo.application.show_order import payment_to_dto
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.audit import AuditEventType
from fgo.domain.model.payment import PaymentMethod, mode_for_method
from fgo.domain.model.value_objects import Money
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.service.payment_status import PaymentStatusService

logger = logging.getLogger(__name__)


class UpdatePaymentHandler:

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
        payment_id: str,
        actor: str | None = None,
        amount: str | int | Decimal | None = None,
        method: PaymentMethod | str | None = None,
        payment_date: date | None = None,
        reference: str | None = None,
        paid_to: str | None = None,
        notes: str | None = None,
    ) -> PaymentDTO:
        """Change the given fields of a payment; ``None`` leaves a field as is."""
        payment = self._payment_repo.get_by_id(payment_id)
        if payment is None:
            raise EntityNotFoundError(f"Payment '{payment_id}' not found")
        order = load_order(self._order_repo, payment.order_id)
        order.ensure_unlocked()

        changes: dict = {}
        if amount is not None:
            changes["amount_received"] = Money.of(amount)
        if method is not None:
            changes["mode"] = mode_for_method(parse_method(method))
        if payment_date is not None:
            changes["payment_date"] = payment_date
        if reference is not None:
            changes["reference"] = reference
        if paid_to is not None:
            changes["paid_to"] = paid_to
        if notes is not None:
            changes["notes"] = notes
        # replace() re-runs the positive amount check
        updated = dataclasses.replace(payment, **changes)

        self._payment_repo.save(updated)
        self._mirror.update_for(updated, order)

        refresh_order(order, self._payments, self._audit, actor, self._clock())
        self._order_repo.save(order)

        self._audit.record(
            order.id, AuditEventType.PAYMENT_UPDATED, actor,
            f"Payment {payment.id} changed from {payment.amount_received} "
            f"to {updated.amount_received}",
            payment_id=payment.id, previous_amount=payment.amount_received,
            amount=updated.amount_received, payment_status=order.payment_status,
        )
        logger.info("Updated payment %s of order %s", payment.id, order.order_number)
        return payment_to_dto(updated)
