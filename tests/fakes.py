"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.  Stored
objects are copied on the way in and out, as a real store would.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fgo.application.accounting_mirror import AccountingMirror
from fgo.application.audit_recorder import AuditRecorder
from fgo.domain.exceptions import EntityNotFoundError
from fgo.domain.model.audit import AuditEvent
from fgo.domain.model.customer import Customer, CustomerType
from fgo.domain.model.delivery import DeliveryDispatch
from fgo.domain.model.invoice import Invoice
from fgo.domain.model.order import Order, OrderLineItem
from fgo.domain.model.payment import AccountingEntry, Payment
from fgo.domain.model.reservation import Reservation
from fgo.domain.model.stock_lot import StockLot, WasteRecord
from fgo.domain.model.value_objects import ZERO
from fgo.domain.repository.accounting_ledger import AccountingLedger
from fgo.domain.repository.audit_repository import AuditRepository
from fgo.domain.repository.customer_repository import CustomerRepository
from fgo.domain.repository.delivery_repository import DeliveryRepository
from fgo.domain.repository.invoice_repository import InvoiceRepository
from fgo.domain.repository.order_number_generator import OrderNumberGenerator
from fgo.domain.repository.order_repository import OrderRepository
from fgo.domain.repository.payment_repository import PaymentRepository
from fgo.domain.repository.reservation_repository import ReservationRepository
from fgo.domain.repository.stock_lot_repository import StockLotRepository
from fgo.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from fgo.domain.service.order_numbers import format_order_number
from fgo.domain.service.payment_status import PaymentStatusService


class FakeStockLotRepository(StockLotRepository):

    def __init__(self, lots: list[StockLot] | None = None) -> None:
        self._store: dict[str, StockLot] = {}
        self.waste: list[WasteRecord] = []
        for lot in lots or []:
            self.save(lot)

    def get_by_id(self, lot_id: str) -> StockLot | None:
        return copy.deepcopy(self._store.get(lot_id))

    def list_all(self) -> list[StockLot]:
        return [copy.deepcopy(lot) for lot in self._store.values()]

    def save(self, lot: StockLot) -> None:
        self._store[lot.id] = copy.deepcopy(lot)

    def adjust_available(self, lot_id: str, delta: Decimal) -> StockLot:
        lot = self._store.get(lot_id)
        if lot is None:
            raise EntityNotFoundError(f"Stock lot '{lot_id}' not found")
        lot.adjust_available(delta)
        return copy.deepcopy(lot)

    def add_waste(self, record: WasteRecord) -> None:
        self.waste.append(record)

    def total_wasted(self, lot_id: str) -> Decimal:
        return sum((w.quantity_wasted for w in self.waste if w.stock_lot_id == lot_id), ZERO)


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1

    def next_id(self) -> int:
        return self._next_id

    def get_by_id(self, order_id: int) -> Order | None:
        return copy.deepcopy(self._store.get(order_id))

    def get_by_line_item_id(self, item_id: str) -> Order | None:
        for order in self._store.values():
            if any(item.id == item_id for item in order.items):
                return copy.deepcopy(order)
        return None

    def list_all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._store.values()]

    def list_items_for_lot(self, lot_id: str) -> list[OrderLineItem]:
        return [
            copy.deepcopy(item)
            for order in self._store.values()
            for item in order.items
            if item.stock_lot_id == lot_id
        ]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._next_id
        self._next_id = max(self._next_id, order.id + 1)
        self._store[order.id] = copy.deepcopy(order)

    def delete(self, order_id: int) -> None:
        self._store.pop(order_id, None)


class FakeReservationRepository(ReservationRepository):

    def __init__(self) -> None:
        self._store: dict[str, Reservation] = {}

    def get_by_line_item(self, line_item_id: str) -> Reservation | None:
        for r in self._store.values():
            if r.line_item_id == line_item_id:
                return r
        return None

    def list_for_lot(self, lot_id: str) -> list[Reservation]:
        return [r for r in self._store.values() if r.stock_lot_id == lot_id]

    def list_for_order(self, order_id: int) -> list[Reservation]:
        return [r for r in self._store.values() if r.order_id == order_id]

    def list_all(self) -> list[Reservation]:
        return list(self._store.values())

    def replace(self, reservation: Reservation) -> None:
        self.delete_for_line_item(reservation.line_item_id)
        self._store[reservation.id] = reservation

    def delete_for_line_item(self, line_item_id: str) -> None:
        self._store = {k: r for k, r in self._store.items() if r.line_item_id != line_item_id}

    def delete_for_order(self, order_id: int) -> None:
        self._store = {k: r for k, r in self._store.items() if r.order_id != order_id}


class FakeDeliveryRepository(DeliveryRepository):

    def __init__(self) -> None:
        self.dispatches: list[DeliveryDispatch] = []

    def add(self, dispatch: DeliveryDispatch) -> None:
        self.dispatches.append(dispatch)

    def list_for_order(self, order_id: int) -> list[DeliveryDispatch]:
        return [d for d in self.dispatches if d.order_id == order_id]

    def list_for_line_item(self, line_item_id: str) -> list[DeliveryDispatch]:
        return [d for d in self.dispatches if d.line_item_id == line_item_id]

    def list_all(self) -> list[DeliveryDispatch]:
        return list(self.dispatches)

    def delete_for_order(self, order_id: int) -> None:
        self.dispatches = [d for d in self.dispatches if d.order_id != order_id]


class FakePaymentRepository(PaymentRepository):

    def __init__(self) -> None:
        self._store: dict[str, Payment] = {}

    def get_by_id(self, payment_id: str) -> Payment | None:
        return copy.deepcopy(self._store.get(payment_id))

    def list_for_order(self, order_id: int) -> list[Payment]:
        return [copy.deepcopy(p) for p in self._store.values() if p.order_id == order_id]

    def list_all(self) -> list[Payment]:
        return [copy.deepcopy(p) for p in self._store.values()]

    def save(self, payment: Payment) -> None:
        self._store[payment.id] = copy.deepcopy(payment)

    def delete(self, payment_id: str) -> None:
        self._store.pop(payment_id, None)

    def delete_for_order(self, order_id: int) -> None:
        self._store = {k: p for k, p in self._store.items() if p.order_id != order_id}


class FakeAuditRepository(AuditRepository):

    def __init__(self) -> None:
        self.events: list[AuditEvent] = []

    def append(self, event: AuditEvent) -> None:
        self.events.append(event)

    def list_for_order(self, order_id: int) -> list[AuditEvent]:
        return [e for e in self.events if e.order_id == order_id]

    def types_for(self, order_id: int) -> list[str]:
        return [e.event_type.value for e in self.list_for_order(order_id)]


class FakeCustomerRepository(CustomerRepository):

    def __init__(self, customers: list[Customer] | None = None) -> None:
        self._store: dict[str, Customer] = {}
        for c in customers or []:
            self._store[c.id] = c

    def get_by_id(self, customer_id: str) -> Customer | None:
        return self._store.get(customer_id)

    def list_all(self) -> list[Customer]:
        return list(self._store.values())

    def save(self, customer: Customer) -> None:
        self._store[customer.id] = customer


class FakeInvoiceRepository(InvoiceRepository):

    def __init__(self) -> None:
        self.invoices: list[Invoice] = []

    def list_for_order(self, order_id: int) -> list[Invoice]:
        return [i for i in self.invoices if i.order_id == order_id]

    def list_all(self) -> list[Invoice]:
        return list(self.invoices)

    def save(self, invoice: Invoice) -> None:
        self.invoices = [i for i in self.invoices if i.id != invoice.id] + [invoice]

    def delete_for_order(self, order_id: int) -> None:
        self.invoices = [i for i in self.invoices if i.order_id != order_id]


class FakeAccountingLedger(AccountingLedger):

    def __init__(self) -> None:
        self._store: dict[str, AccountingEntry] = {}

    def find_for_payment(self, payment_id: str) -> AccountingEntry | None:
        for entry in self._store.values():
            if entry.payment_id == payment_id:
                return entry
        return None

    def list_all(self) -> list[AccountingEntry]:
        return list(self._store.values())

    def save(self, entry: AccountingEntry) -> None:
        self._store[entry.id] = entry

    def delete_for_order(self, order_id: int) -> None:
        self._store = {k: e for k, e in self._store.items() if e.order_id != order_id}


class FakeOrderNumberGenerator(OrderNumberGenerator):

    def __init__(self) -> None:
        self._last = 0

    def next_number(self) -> str:
        self._last += 1
        return format_order_number(self._last)


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeWorld:
    """Every fake repository and shared service, wired together."""

    clock: FixedClock = field(default_factory=FixedClock)
    lots: FakeStockLotRepository = field(default_factory=FakeStockLotRepository)
    orders: FakeOrderRepository = field(default_factory=FakeOrderRepository)
    reservation_repo: FakeReservationRepository = field(default_factory=FakeReservationRepository)
    deliveries: FakeDeliveryRepository = field(default_factory=FakeDeliveryRepository)
    payment_repo: FakePaymentRepository = field(default_factory=FakePaymentRepository)
    audit_repo: FakeAuditRepository = field(default_factory=FakeAuditRepository)
    customers: FakeCustomerRepository = field(
        default_factory=lambda: FakeCustomerRepository(
            [Customer(id="1", name="Hotel Saffron", customer_type=CustomerType.HOTEL)]
        )
    )
    invoices: FakeInvoiceRepository = field(default_factory=FakeInvoiceRepository)
    ledger: FakeAccountingLedger = field(default_factory=FakeAccountingLedger)
    numbers: FakeOrderNumberGenerator = field(default_factory=FakeOrderNumberGenerator)

    @property
    def reservations(self) -> InventoryReservationService:
        return InventoryReservationService(self.lots, self.orders, self.reservation_repo)

    @property
    def payments(self) -> PaymentStatusService:
        return PaymentStatusService(self.payment_repo)

    @property
    def audit(self) -> AuditRecorder:
        return AuditRecorder(self.audit_repo, self.clock)

    @property
    def mirror(self) -> AccountingMirror:
        return AccountingMirror(self.ledger, self.customers)

    def add_lot(
        self, lot_id: str = "1", quantity: str = "100", product_type: str = "Paneer",
        batch_reference: str = "B-001",
    ) -> StockLot:
        lot = StockLot.produce(lot_id, product_type, Decimal(quantity), "kg", batch_reference)
        self.lots.save(lot)
        return lot

    def place_order(self, *items: tuple[str, str, str], customer_id: str = "1") -> int:
        """Create an order through the real handler; items are (lot, qty, price)."""
        from fgo.application.create_order import CreateOrderHandler
        from fgo.application.dto import OrderItemSpec

        handler = CreateOrderHandler(
            self.orders, self.lots, self.customers, self.numbers,
            self.reservations, self.audit, self.clock,
        )
        dto = handler.handle(
            customer_id, [OrderItemSpec(*item) for item in items], actor="alice"
        )
        return dto.id
