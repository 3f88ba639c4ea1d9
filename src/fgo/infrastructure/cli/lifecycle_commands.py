"""CLI commands for order status, hold, lock and maintenance."""

from __future__ import annotations

import click

from fgo.application.backfill_completed_at import BackfillCompletedAtHandler
from fgo.application.dto import LockInfoDTO
from fgo.application.hold_order import RemoveHoldHandler, SetOnHoldHandler
from fgo.application.lock_order import (
    LockOrderHandler,
    ShowLockInfoHandler,
    UnlockOrderHandler,
)
from fgo.application.reconcile_orders import ReconcileOrdersHandler
from fgo.application.show_audit_log import (
    BackfillAuditLogHandler,
    LockHistoryHandler,
    ShowAuditLogHandler,
)
from fgo.application.update_status import UpdateStatusHandler
from fgo.domain.exceptions import DomainException
from fgo.domain.model.order import MANUAL_STATUSES
from fgo.infrastructure.bootstrap import (
    accounting_ledger,
    audit_recorder,
    audit_repository,
    delivery_repository,
    invoice_repository,
    order_repository,
    payment_repository,
    payment_status_service,
    reservation_repository,
    settings,
)
from fgo.infrastructure.cli.context import current_actor, fmt_dt


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--set", "status", required=True,
              type=click.Choice([s.value for s in MANUAL_STATUSES], case_sensitive=False))
def order_status(order_id: int, status: str) -> None:
    """Set an order's status by hand."""
    handler = UpdateStatusHandler(order_repository(), audit_recorder())

    try:
        handler.handle(order_id, status, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} status set to {status.upper()}.")


@click.command("hold")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--reason", required=True, help="Why the order is held.")
def order_hold(order_id: int, reason: str) -> None:
    """Place an order on hold."""
    handler = SetOnHoldHandler(order_repository(), payment_status_service(), audit_recorder())

    try:
        handler.handle(order_id, reason, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is on hold.")


@click.command("unhold")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_unhold(order_id: int) -> None:
    """Remove the hold from an order."""
    handler = RemoveHoldHandler(order_repository(), payment_status_service(), audit_recorder())

    try:
        handler.handle(order_id, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Hold removed from order #{order_id}.")


def _display_lock(info: LockInfoDTO) -> None:
    if not info.is_locked:
        click.echo(f"Order {info.order_number} is not locked.")
        return
    click.echo(f"Order {info.order_number} locked at {fmt_dt(info.locked_at)} by {info.locked_by or '-'}")
    if info.can_unlock:
        hours = int(info.time_remaining.total_seconds() // 3600) if info.time_remaining else 0
        click.echo(f"Unlock possible until {fmt_dt(info.unlock_deadline)} ({hours}h left)")
    else:
        click.echo("Unlock window has expired; the order is permanently locked.")


@click.command("lock")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_lock(order_id: int) -> None:
    """Lock a completed order against changes."""
    handler = LockOrderHandler(
        order_repository(), payment_status_service(), audit_recorder(),
        window=settings().unlock_window,
    )

    try:
        info = handler.handle(order_id, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_lock(info)


@click.command("unlock")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--reason", required=True, help="Why the order is unlocked.")
def order_unlock(order_id: int, reason: str) -> None:
    """Unlock an order within its unlock window."""
    handler = UnlockOrderHandler(order_repository(), audit_recorder())

    try:
        handler.handle(order_id, reason, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} unlocked.")


@click.command("lock-info")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_lock_info(order_id: int) -> None:
    """Show lock state and remaining unlock time."""
    try:
        info = ShowLockInfoHandler(order_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_lock(info)


@click.command("audit")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--locks", is_flag=True, default=False, help="Only lock and unlock events, newest first.")
def order_audit(order_id: int, locks: bool) -> None:
    """Show the audit log of an order."""
    handler_cls = LockHistoryHandler if locks else ShowAuditLogHandler

    try:
        events = handler_cls(order_repository(), audit_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not events:
        click.echo("No audit events recorded.")
        return
    for e in events:
        click.echo(f"  {fmt_dt(e.timestamp)}  {e.event_type.value:<18} {e.actor or '-':<12} {e.detail}")


@click.command("backfill")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_backfill(order_id: int) -> None:
    """Fill in a missing completion time and audit log for an old order."""
    completed = BackfillCompletedAtHandler(order_repository()).handle(order_id)
    handler = BackfillAuditLogHandler(order_repository(), audit_repository(), audit_recorder())

    try:
        audited = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"completed_at backfilled: {'yes' if completed else 'no'}")
    click.echo(f"audit log backfilled:    {'yes' if audited else 'no'}")


@click.command("reconcile")
@click.option("--purge", is_flag=True, default=False, help="Delete the orphaned rows found.")
def order_reconcile(purge: bool) -> None:
    """Find rows left behind by interrupted order writes."""
    handler = ReconcileOrdersHandler(
        order_repo=order_repository(),
        reservation_repo=reservation_repository(),
        delivery_repo=delivery_repository(),
        payment_repo=payment_repository(),
        invoice_repo=invoice_repository(),
        ledger=accounting_ledger(),
    )
    report = handler.handle(purge=purge)

    if not report.total:
        click.echo("Nothing to reconcile.")
        return
    for label, ids in (
        ("reservations", report.reservations),
        ("dispatches", report.dispatches),
        ("payments", report.payments),
        ("accounting entries", report.accounting_entries),
        ("invoices", report.invoices),
    ):
        if ids:
            click.echo(f"  {len(ids)} orphaned {label}")
    click.echo("Purged." if report.purged else "Run again with --purge to delete them.")
