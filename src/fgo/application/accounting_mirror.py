"""Application service: keep the accounting collaborator's income entries
in step with order payments.

A new payment gets exactly one new entry.  An edited payment updates its
linked entry if there is one; a missing entry is not recreated.  Neither
path may fail the payment operation itself, so errors are logged and
swallowed here.
"""

from __future__ import annotations

import logging
import uuid

from fgo.domain.model.order import Order
from fgo.domain.model.payment import AccountingEntry, Payment, method_for_mode
from fgo.domain.repository.accounting_ledger import AccountingLedger
from fgo.domain.repository.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)


class AccountingMirror:

    def __init__(
        self,
        ledger: AccountingLedger,
        customer_repo: CustomerRepository | None = None,
    ) -> None:
        self._ledger = ledger
        self._customer_repo = customer_repo

    def create_for(self, payment: Payment, order: Order) -> AccountingEntry | None:
        try:
            entry = AccountingEntry(id=uuid.uuid4().hex, payment_id=payment.id,
                                    **self._fields(payment, order))
            self._ledger.save(entry)
        except Exception:
            logger.exception(
                "Could not create accounting entry for payment %s of order %s",
                payment.id, order.order_number,
            )
            return None
        return entry

    def update_for(self, payment: Payment, order: Order) -> AccountingEntry | None:
        try:
            existing = self._ledger.find_for_payment(payment.id)
            if existing is None:
                logger.debug("No accounting entry linked to payment %s", payment.id)
                return None
            entry = AccountingEntry(id=existing.id, payment_id=payment.id,
                                    **self._fields(payment, order))
            self._ledger.save(entry)
        except Exception:
            logger.exception(
                "Could not update accounting entry for payment %s of order %s",
                payment.id, order.order_number,
            )
            return None
        return entry

    # --- Internal helpers -----------------------------------------------------

    def _fields(self, payment: Payment, order: Order) -> dict:
        customer_name = self._customer_name(order.customer_id)
        description = f"Auto-generated from Order Payment: {order.order_number}"
        if payment.reference:
            description += f" | Transaction: {payment.reference}"
        if payment.notes:
            description += f" | Notes: {payment.notes}"
        reason = f"Payment for Order {order.order_number}"
        if customer_name:
            reason += f" - Customer: {customer_name}"
        return {
            "order_id": payment.order_id,
            "amount": payment.amount_received,
            "payment_date": payment.payment_date,
            "method": method_for_mode(payment.mode),
            "reference": payment.reference,
            "paid_to": payment.paid_to,
            "paid_to_user": payment.paid_to_user,
            "reason": reason,
            "description": description,
            "source": customer_name or "Sales",
        }

    def _customer_name(self, customer_id: str) -> str | None:
        if self._customer_repo is None:
            return None
        customer = self._customer_repo.get_by_id(customer_id)
        return customer.name if customer else None
