import click

from fgo.infrastructure.bootstrap import settings
from fgo.infrastructure.cli.customer_commands import (
    customer_add,
    customer_list,
    customer_show,
)
from fgo.infrastructure.cli.delivery_commands import order_deliver, order_deliveries
from fgo.infrastructure.cli.lifecycle_commands import (
    order_audit,
    order_backfill,
    order_hold,
    order_lock,
    order_lock_info,
    order_reconcile,
    order_status,
    order_unhold,
    order_unlock,
)
from fgo.infrastructure.cli.lot_commands import lot_add, lot_list, lot_waste
from fgo.infrastructure.cli.order_commands import (
    order_add_item,
    order_create,
    order_delete,
    order_delete_item,
    order_discount,
    order_list,
    order_show,
    order_update_item,
)
from fgo.infrastructure.cli.payment_commands import (
    payment_add,
    payment_delete,
    payment_list,
    payment_status,
    payment_update,
)
from fgo.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--actor", envvar="FGO_ACTOR", default=None, help="Acting user, recorded in the audit log.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, actor: str | None, verbose: bool) -> None:
    """FGO — Finished-Goods Order engine"""
    configure_logging("DEBUG" if verbose else settings().log_level)
    ctx.obj = {"actor": actor}


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def lot() -> None:
    """Manage stock lots."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def payment() -> None:
    """Manage order payments."""


# Register subcommands
customer.add_command(customer_add)
customer.add_command(customer_list)
customer.add_command(customer_show)
lot.add_command(lot_add)
lot.add_command(lot_list)
lot.add_command(lot_waste)
order.add_command(order_add_item)
order.add_command(order_audit)
order.add_command(order_backfill)
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_delete_item)
order.add_command(order_deliver)
order.add_command(order_deliveries)
order.add_command(order_discount)
order.add_command(order_hold)
order.add_command(order_list)
order.add_command(order_lock)
order.add_command(order_lock_info)
order.add_command(order_reconcile)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_unhold)
order.add_command(order_unlock)
order.add_command(order_update_item)
payment.add_command(payment_add)
payment.add_command(payment_delete)
payment.add_command(payment_list)
payment.add_command(payment_status)
payment.add_command(payment_update)
