"""CLI commands for customers."""

from __future__ import annotations

import click

from fgo.application.add_customer import AddCustomerHandler
from fgo.application.show_customer import ListCustomersHandler, ShowCustomerHandler
from fgo.domain.exceptions import DomainException
from fgo.domain.model.customer import CustomerType
from fgo.infrastructure.bootstrap import customer_repository


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option(
    "--type", "customer_type", default=CustomerType.DIRECT.value, show_default=True,
    type=click.Choice([t.value for t in CustomerType], case_sensitive=False),
)
@click.option("--contact", default=None, help="Contact person.")
@click.option("--phone", default=None)
@click.option("--address", default=None)
@click.option("--notes", default=None)
def customer_add(
    name: str,
    customer_type: str,
    contact: str | None,
    phone: str | None,
    address: str | None,
    notes: str | None,
) -> None:
    """Register a customer."""
    handler = AddCustomerHandler(customer_repo=customer_repository())

    try:
        customer = handler.handle(
            name, customer_type, contact_person=contact, phone=phone,
            address=address, notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer {customer.id} added: {customer.name} ({customer.customer_type.value})")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include inactive customers.")
def customer_list(include_inactive: bool) -> None:
    """List customers."""
    customers = ListCustomersHandler(customer_repo=customer_repository()).handle(include_inactive)
    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"  {'ID':<6} {'Name':<30} {'Type':<12} {'Status':<8}")
    click.echo(f"  {'-'*59}")
    for c in customers:
        click.echo(f"  {c.id:<6} {c.name:<30} {c.customer_type.value:<12} {c.status.value:<8}")


@click.command("show")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
def customer_show(customer_id: str) -> None:
    """Show one customer."""
    handler = ShowCustomerHandler(customer_repo=customer_repository())

    try:
        c = handler.handle(customer_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer {c.id}: {c.name}")
    click.echo(f"Type:    {c.customer_type.value}")
    click.echo(f"Status:  {c.status.value}")
    for label, value in (("Contact", c.contact_person), ("Phone", c.phone),
                         ("Address", c.address), ("Notes", c.notes)):
        if value:
            click.echo(f"{label + ':':<9}{value}")
