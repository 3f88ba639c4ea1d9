"""CLI commands for stock lots."""

from __future__ import annotations

import click

from fgo.application.add_stock_lot import AddStockLotHandler
from fgo.application.record_waste import RecordWasteHandler
from fgo.application.show_stock import ShowStockHandler
from fgo.domain.exceptions import DomainException
from fgo.infrastructure.bootstrap import reservation_service, stock_lot_repository
from fgo.infrastructure.cli.context import current_actor


@click.command("add")
@click.option("--product", required=True, help="Product type, e.g. 'Paneer'.")
@click.option("--quantity", required=True, help="Quantity produced.")
@click.option("--unit", default="kg", show_default=True)
@click.option("--batch", "batch_reference", default="", help="Batch reference.")
def lot_add(product: str, quantity: str, unit: str, batch_reference: str) -> None:
    """Record a produced stock lot."""
    handler = AddStockLotHandler(lot_repo=stock_lot_repository())

    try:
        lot = handler.handle(product, quantity, unit=unit, batch_reference=batch_reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Lot {lot.id} added: {lot.quantity_created:f} {lot.unit} of {lot.label}")


@click.command("list")
def lot_list() -> None:
    """List stock lots with both availability figures."""
    lines = ShowStockHandler(stock_lot_repository(), reservation_service()).handle()
    if not lines:
        click.echo("No stock lots found.")
        return

    click.echo(
        f"  {'ID':<5} {'Product':<18} {'Batch':<12} {'Unit':<5} {'Created':>9} "
        f"{'Counter':>9} {'Wasted':>8} {'Display':>9} {'ForSale':>9}"
    )
    click.echo(f"  {'-'*92}")
    for line in lines:
        click.echo(
            f"  {line.lot_id:<5} {line.product_type:<18} {line.batch_reference:<12} "
            f"{line.unit:<5} {line.created:>9f} {line.counter:>9f} {line.wasted:>8f} "
            f"{line.display_available:>9f} {line.available_for_sale:>9f}"
        )


@click.command("waste")
@click.option("--id", "lot_id", required=True, help="Stock lot ID.")
@click.option("--quantity", required=True, help="Quantity written off.")
@click.option("--reason", required=True, help="Why the stock was written off.")
def lot_waste(lot_id: str, quantity: str, reason: str) -> None:
    """Write off part of a lot as waste."""
    handler = RecordWasteHandler(stock_lot_repository(), reservation_service())

    try:
        record = handler.handle(lot_id, quantity, reason, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Recorded {record.quantity_wasted:f} waste on lot {lot_id}.")
