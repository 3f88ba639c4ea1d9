"""CLI commands for order payments."""

from __future__ import annotations

import click

from fgo.application.create_payment import CreatePaymentHandler
from fgo.application.delete_payment import DeletePaymentHandler
from fgo.application.list_payments import ListPaymentsHandler
from fgo.application.show_payment_status import ShowPaymentStatusHandler
from fgo.application.update_payment import UpdatePaymentHandler
from fgo.domain.exceptions import DomainException
from fgo.domain.model.payment import PaymentMethod
from fgo.infrastructure.bootstrap import (
    accounting_mirror,
    audit_recorder,
    order_repository,
    payment_repository,
)
from fgo.infrastructure.cli.context import DATE, as_date, current_actor

_METHODS = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)


@click.command("add")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--amount", required=True)
@click.option("--method", default=PaymentMethod.CASH.value, show_default=True, type=_METHODS)
@click.option("--date", "payment_date", type=DATE, default=None, help="Payment date (YYYY-MM-DD).")
@click.option("--reference", default=None, help="Transaction reference.")
@click.option("--paid-to", default=None, help="Account that received the money.")
@click.option("--evidence", "evidence_url", default=None, help="Link to a receipt.")
@click.option("--notes", default=None)
def payment_add(order_id: int, amount: str, method: str, payment_date, reference: str | None,
                paid_to: str | None, evidence_url: str | None, notes: str | None) -> None:
    """Record a payment against an order."""
    handler = CreatePaymentHandler(
        order_repo=order_repository(),
        payment_repo=payment_repository(),
        mirror=accounting_mirror(),
        audit=audit_recorder(),
    )

    try:
        dto = handler.handle(
            order_id, amount, actor=current_actor(), method=method,
            payment_date=as_date(payment_date), reference=reference,
            paid_to=paid_to, evidence_url=evidence_url, notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment {dto.id} of {dto.amount_received} recorded ({dto.mode}).")


@click.command("update")
@click.option("--payment", "payment_id", required=True, help="Payment ID.")
@click.option("--amount", default=None)
@click.option("--method", default=None, type=_METHODS)
@click.option("--date", "payment_date", type=DATE, default=None)
@click.option("--reference", default=None)
@click.option("--paid-to", default=None)
@click.option("--notes", default=None)
def payment_update(payment_id: str, amount: str | None, method: str | None, payment_date,
                   reference: str | None, paid_to: str | None, notes: str | None) -> None:
    """Change a recorded payment."""
    handler = UpdatePaymentHandler(
        order_repo=order_repository(),
        payment_repo=payment_repository(),
        mirror=accounting_mirror(),
        audit=audit_recorder(),
    )

    try:
        dto = handler.handle(
            payment_id, actor=current_actor(), amount=amount, method=method,
            payment_date=as_date(payment_date), reference=reference,
            paid_to=paid_to, notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment {dto.id} updated: {dto.amount_received} ({dto.mode}).")


@click.command("delete")
@click.option("--payment", "payment_id", required=True, help="Payment ID.")
def payment_delete(payment_id: str) -> None:
    """Delete a payment."""
    handler = DeletePaymentHandler(order_repository(), payment_repository(), audit_recorder())

    try:
        handler.handle(payment_id, actor=current_actor())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment {payment_id} deleted.")


@click.command("list")
@click.option("--id", "order_id", type=int, default=None, help="Only this order's payments.")
def payment_list(order_id: int | None) -> None:
    """List payments, newest first."""
    try:
        payments = ListPaymentsHandler(order_repository(), payment_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not payments:
        click.echo("No payments found.")
        return
    click.echo(f"  {'ID':<10} {'Order':>6} {'Date':<10} {'Amount':>16} {'Mode':<5} Reference")
    click.echo(f"  {'-'*62}")
    for p in payments:
        click.echo(
            f"  {p.id[:8]:<10} {p.order_id:>6} {p.payment_date.isoformat():<10} "
            f"{p.amount_received:>16} {p.mode:<5} {p.reference or ''}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def payment_status(order_id: int) -> None:
    """Show an order's payment status."""
    try:
        dto = ShowPaymentStatusHandler(order_repository(), payment_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.order_id}: {dto.payment_status}")
    click.echo(f"  Net total:   {dto.net_total:,.2f}")
    click.echo(f"  Paid:        {dto.total_paid:,.2f}")
    click.echo(f"  Outstanding: {dto.outstanding:,.2f}")
