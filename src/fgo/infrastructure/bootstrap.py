"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from fgo.application.accounting_mirror import AccountingMirror
from fgo.application.audit_recorder import AuditRecorder
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.domain.service.payment_status import PaymentStatusService
from fgo.infrastructure.config import Settings
from fgo.infrastructure.persistence.json_accounting_ledger import JsonAccountingLedger
from fgo.infrastructure.persistence.json_audit_repository import JsonAuditRepository
from fgo.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from fgo.infrastructure.persistence.json_delivery_repository import (
    JsonDeliveryRepository,
)
from fgo.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from fgo.infrastructure.persistence.json_order_number_generator import (
    JsonOrderNumberGenerator,
)
from fgo.infrastructure.persistence.json_order_repository import JsonOrderRepository
from fgo.infrastructure.persistence.json_payment_repository import (
    JsonPaymentRepository,
)
from fgo.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from fgo.infrastructure.persistence.json_stock_lot_repository import (
    JsonStockLotRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


def stock_lot_repository() -> JsonStockLotRepository:
    data = settings().data_dir
    return JsonStockLotRepository(data / "stock_lots.json", data / "waste.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def reservation_repository() -> JsonReservationRepository:
    return JsonReservationRepository(settings().data_dir / "reservations.json")


def delivery_repository() -> JsonDeliveryRepository:
    return JsonDeliveryRepository(settings().data_dir / "deliveries.json")


def payment_repository() -> JsonPaymentRepository:
    return JsonPaymentRepository(settings().data_dir / "payments.json")


def audit_repository() -> JsonAuditRepository:
    return JsonAuditRepository(settings().data_dir / "audit_log.json")


def customer_repository() -> JsonCustomerRepository:
    return JsonCustomerRepository(settings().data_dir / "customers.json")


def invoice_repository() -> JsonInvoiceRepository:
    return JsonInvoiceRepository(settings().data_dir / "invoices.json")


def accounting_ledger() -> JsonAccountingLedger:
    return JsonAccountingLedger(settings().data_dir / "accounting_entries.json")


def order_number_generator() -> JsonOrderNumberGenerator:
    return JsonOrderNumberGenerator(
        settings().data_dir / "order_sequence.json", order_repository()
    )


# --- Services -----------------------------------------------------------------

def reservation_service() -> InventoryReservationService:
    return InventoryReservationService(
        stock_lot_repository(), order_repository(), reservation_repository()
    )


def payment_status_service() -> PaymentStatusService:
    return PaymentStatusService(payment_repository())


def audit_recorder() -> AuditRecorder:
    return AuditRecorder(audit_repository())


def accounting_mirror() -> AccountingMirror:
    return AccountingMirror(accounting_ledger(), customer_repository())
