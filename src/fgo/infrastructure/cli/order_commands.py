"""CLI commands for the Order aggregate and its line items."""

from __future__ import annotations

import click

from fgo.application.add_item import AddItemHandler
from fgo.application.apply_discount import ApplyDiscountHandler
from fgo.application.create_order import CreateOrderHandler
from fgo.application.delete_item import DeleteItemHandler
from fgo.application.delete_order import DeleteOrderHandler
from fgo.application.dto import DeletionPreview, OrderDTO, OrderFilter, OrderItemSpec
from fgo.application.list_orders import ListOrdersHandler
from fgo.application.show_order import ShowOrderHandler
from fgo.application.update_item import UpdateItemHandler
from fgo.domain.exceptions import DomainException
from fgo.infrastructure.bootstrap import (
    accounting_ledger,
    audit_recorder,
    customer_repository,
    delivery_repository,
    invoice_repository,
    order_number_generator,
    order_repository,
    payment_repository,
    payment_status_service,
    reservation_repository,
    reservation_service,
    stock_lot_repository,
)
from fgo.infrastructure.cli.context import DATE, as_date, current_actor, fmt_dt


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'LOT:QTY@PRICE,LOT:QTY@PRICE' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if ":" not in entry or "@" not in entry:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'LotId:Quantity@Price'."
            )
        lot_id, rest = entry.split(":", 1)
        qty, price = rest.rsplit("@", 1)
        specs.append(
            OrderItemSpec(stock_lot_id=lot_id.strip(), quantity=qty.strip(), unit_price=price.strip())
        )
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.display_status}  payment={dto.payment_status}")
    click.echo(f"Customer: {dto.customer_name or dto.customer_id}")
    click.echo(f"Date:     {dto.order_date.isoformat()}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.is_on_hold:
        click.echo(f"On hold:  {dto.hold_reason}")
    if dto.is_locked:
        click.echo(f"Locked:   unlock possible until {fmt_dt(dto.unlock_deadline)}")
    click.echo()

    if dto.has_deliveries:
        # Extended table with delivered / remaining columns
        click.echo(
            f"  {'Item':<10} {'Product':<18} {'Qty':>8} {'Delivered':>10} {'Remaining':>10} {'Price':>14} {'Total':>16}"
        )
        click.echo(f"  {'-'*92}")
        for item in dto.items:
            click.echo(
                f"  {item.id[:8]:<10} {item.product_type:<18} {item.quantity:>8f} "
                f"{item.quantity_delivered:>10f} {item.remaining_quantity:>10f} "
                f"{item.unit_price:>14} {item.line_total:>16}"
            )
        click.echo(f"  {'-'*92}")
    else:
        click.echo(f"  {'Item':<10} {'Product':<18} {'Qty':>8} {'Price':>14} {'Total':>16}")
        click.echo(f"  {'-'*70}")
        for item in dto.items:
            click.echo(
                f"  {item.id[:8]:<10} {item.product_type:<18} {item.quantity:>8f} "
                f"{item.unit_price:>14} {item.line_total:>16}"
            )
        click.echo(f"  {'-'*70}")

    click.echo(f"  {'Order Total':<20} {dto.total:>20}")
    click.echo(f"  {'Discount':<20} {dto.discount:>20}")
    click.echo(f"  {'Net Total':<20} {dto.net_total:>20}")
    click.echo(f"  {'Paid':<20} {dto.total_paid:>20}")
    click.echo(f"  {'Outstanding':<20} {dto.outstanding:>20}")


@click.command("create")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--items", default=None, help="Items as 'LotId:Qty@Price,LotId:Qty@Price'.")
@click.option("--date", "order_date", type=DATE, default=None, help="Order date (YYYY-MM-DD).")
@click.option("--sold-by", default=None, help="Salesperson, defaults to the actor.")
@click.option("--notes", default=None)
def order_create(customer_id: str, items: str | None, order_date, sold_by: str | None, notes: str | None) -> None:
    """Create an order, optionally with its first items."""
    specs = _parse_items(items) if items else []

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        lot_repo=stock_lot_repository(),
        customer_repo=customer_repository(),
        numbers=order_number_generator(),
        reservations=reservation_service(),
        audit=audit_recorder(),
    )

    try:
        dto = handler.handle(
            customer_id, specs, actor=current_actor(), order_date=as_date(order_date),
            sold_by=sold_by, notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(payment_repo=payment_repository(), order_repo=order_repository(),
                               customer_repo=customer_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
    if dto.payments:
        click.echo()
        click.echo("Payments:")
        for p in dto.payments:
            click.echo(f"  {p.payment_date.isoformat()}  {p.amount_received:>16}  {p.mode:<5} {p.reference or ''}")


@click.command("list")
@click.option("--status", "display_status", default=None, help="CREATED, READY_FOR_PAYMENT, COMPLETED or HOLD.")
@click.option("--payment-status", default=None)
@click.option("--customer", "customer_id", default=None, help="Customer ID.")
@click.option("--customer-type", default=None)
@click.option("--product", "product_type", default=None)
@click.option("--mode", "payment_mode", default=None, help="Payment mode: Cash, UPI or Bank.")
@click.option("--from", "date_from", type=DATE, default=None)
@click.option("--to", "date_to", type=DATE, default=None)
@click.option("--search", default=None, help="Match order number, customer or batch.")
def order_list(display_status, payment_status, customer_id, customer_type, product_type,
               payment_mode, date_from, date_to, search) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(
        order_repo=order_repository(),
        payment_repo=payment_repository(),
        customer_repo=customer_repository(),
        lot_repo=stock_lot_repository(),
    )
    rows = handler.handle(OrderFilter(
        display_status=display_status, payment_status=payment_status,
        customer_id=customer_id, customer_type=customer_type,
        product_type=product_type, payment_mode=payment_mode,
        date_from=as_date(date_from), date_to=as_date(date_to), search=search,
    ))
    if not rows:
        click.echo("No orders found.")
        return

    click.echo(f"  {'Number':<11} {'Date':<10} {'Customer':<20} {'Status':<18} {'Payment':<16} {'Total':>16}")
    click.echo(f"  {'-'*96}")
    for r in rows:
        lock = " [locked]" if r.is_locked else ""
        click.echo(
            f"  {r.order_number:<11} {r.order_date.isoformat():<10} {(r.customer_name or r.customer_id)[:20]:<20} "
            f"{r.display_status:<18} {r.payment_status:<16} {r.total:>16}{lock}"
        )


@click.command("add-item")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--lot", "lot_id", required=True, help="Stock lot ID.")
@click.option("--quantity", required=True)
@click.option("--price", required=True, help="Unit price.")
def order_add_item(order_id: int, lot_id: str, quantity: str, price: str) -> None:
    """Add a line item to an order."""
    handler = AddItemHandler(
        order_repo=order_repository(),
        lot_repo=stock_lot_repository(),
        reservations=reservation_service(),
        payments=payment_status_service(),
        audit=audit_recorder(),
    )

    try:
        item = handler.handle(order_id, OrderItemSpec(lot_id, quantity, price), actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item.id} added: {item.quantity:f} {item.unit} of {item.product_type} ({item.line_total})")


@click.command("update-item")
@click.option("--item", "item_id", required=True, help="Line item ID.")
@click.option("--lot", "lot_id", default=None, help="Move the item to another lot.")
@click.option("--quantity", default=None)
@click.option("--price", default=None, help="New unit price.")
def order_update_item(item_id: str, lot_id: str | None, quantity: str | None, price: str | None) -> None:
    """Change a line item that has no deliveries yet."""
    handler = UpdateItemHandler(
        order_repo=order_repository(),
        lot_repo=stock_lot_repository(),
        reservations=reservation_service(),
        payments=payment_status_service(),
        audit=audit_recorder(),
    )

    try:
        item = handler.handle(item_id, actor=current_actor(), stock_lot_id=lot_id,
                              quantity=quantity, unit_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item.id} updated: {item.quantity:f} {item.unit} of {item.product_type} ({item.line_total})")


@click.command("delete-item")
@click.option("--item", "item_id", required=True, help="Line item ID.")
def order_delete_item(item_id: str) -> None:
    """Remove a line item that has no deliveries yet."""
    handler = DeleteItemHandler(
        order_repo=order_repository(),
        reservations=reservation_service(),
        payments=payment_status_service(),
        audit=audit_recorder(),
    )

    try:
        handler.handle(item_id, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item_id} deleted; its reservation was released.")


@click.command("discount")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--amount", required=True, help="Discount amount, 0 to remove.")
def order_discount(order_id: int, amount: str) -> None:
    """Set the discount on an order."""
    handler = ApplyDiscountHandler(order_repository(), payment_status_service(), audit_recorder())

    try:
        handler.handle(order_id, amount, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Discount on order #{order_id} set to {amount}.")


def _confirm_deletion(preview: DeletionPreview) -> bool:
    click.echo(f"About to delete order {preview.order_number}.")
    for product_type, quantity, unit in preview.delivered:
        click.echo(f"  {quantity:f} {unit} of {product_type} delivered; it will be returned to stock")
    if preview.payment_count:
        click.echo(f"  {preview.payment_count} payment(s) totalling {preview.total_paid} will be deleted")
    if preview.invoice_count:
        click.echo(f"  {preview.invoice_count} invoice(s) will be deleted")
    return click.confirm("Continue?", default=False)


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.option("--yes", is_flag=True, default=False, help="Delete without asking.")
def order_delete(order_id: int, yes: bool) -> None:
    """Delete an order and undo its effects on stock, payments and invoices."""
    handler = DeleteOrderHandler(
        order_repo=order_repository(),
        lot_repo=stock_lot_repository(),
        reservation_repo=reservation_repository(),
        delivery_repo=delivery_repository(),
        payment_repo=payment_repository(),
        invoice_repo=invoice_repository(),
        ledger=accounting_ledger(),
    )

    try:
        preview = handler.handle(order_id, actor=current_actor(),
                                 confirm=None if yes else _confirm_deletion)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {preview.order_number} deleted.")
