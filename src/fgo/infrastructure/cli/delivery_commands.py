"""CLI commands for deliveries against order line items."""

from __future__ import annotations

import click

from fgo.application.record_delivery import RecordDeliveryHandler
from fgo.application.show_deliveries import ShowDeliveriesHandler
from fgo.domain.exceptions import DomainException
from fgo.infrastructure.bootstrap import (
    audit_recorder,
    delivery_repository,
    order_repository,
    reservation_service,
    stock_lot_repository,
)
from fgo.infrastructure.cli.context import DATE, as_date, current_actor


@click.command("deliver")
@click.option("--item", "item_id", required=True, help="Line item ID.")
@click.option("--delivered", required=True, help="New cumulative delivered quantity.")
@click.option("--date", "delivery_date", type=DATE, default=None, help="Delivery date (YYYY-MM-DD).")
@click.option("--notes", default=None)
def order_deliver(item_id: str, delivered: str, delivery_date, notes: str | None) -> None:
    """Record how much of a line item has been delivered so far."""
    handler = RecordDeliveryHandler(
        order_repo=order_repository(),
        lot_repo=stock_lot_repository(),
        delivery_repo=delivery_repository(),
        reservations=reservation_service(),
        audit=audit_recorder(),
    )

    try:
        result = handler.handle(item_id, delivered, actor=current_actor(),
                                delivery_date=as_date(delivery_date), notes=notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.change == 0:
        click.echo(f"Item {item_id}: delivered quantity unchanged at {result.quantity_delivered:f}.")
        return
    click.echo(
        f"Item {item_id}: delivered {result.quantity_delivered:f} (change {result.change:+f}); "
        f"lot now has {result.lot_quantity_available:f} available."
    )


@click.command("deliveries")
@click.option("--id", "order_id", type=int, default=None, help="Order ID.")
@click.option("--item", "item_id", default=None, help="Line item ID.")
def order_deliveries(order_id: int | None, item_id: str | None) -> None:
    """Show delivery history, newest first."""
    handler = ShowDeliveriesHandler(delivery_repo=delivery_repository())

    try:
        dispatches = handler.handle(order_id=order_id, line_item_id=item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dispatches:
        click.echo("No deliveries recorded.")
        return
    click.echo(f"  {'Date':<10} {'Item':<10} {'Lot':<6} {'Change':>10}  {'By':<12} Notes")
    click.echo(f"  {'-'*60}")
    for d in dispatches:
        click.echo(
            f"  {d.delivery_date.isoformat():<10} {d.line_item_id[:8]:<10} {d.stock_lot_id:<6} "
            f"{d.quantity_delivered:>+10f}  {d.created_by or '-':<12} {d.notes or ''}"
        )
