"""CLI commands for the Customer aggregate."""

from __future__ import annotations

import click

from pos.application.add_customer import AddCustomerHandler
from pos.application.list_customers import ListCustomersHandler
from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--phone", required=True, help="Phone number (must be unique).")
@click.option("--email", default=None)
@click.option("--address", default=None)
def customer_add(name: str, phone: str, email: str | None, address: str | None) -> None:
    """Register a new customer."""
    handler = AddCustomerHandler(uow=unit_of_work())

    try:
        customer = handler.handle(name=name, phone=phone, email=email, address=address)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer #{customer.id} '{customer.name}' added")


@click.command("list")
@click.option("--search", default=None, help="Match name, phone or email.")
def customer_list(search: str | None) -> None:
    """List customers with their loyalty balance."""
    customers = ListCustomersHandler(uow=unit_of_work()).handle(search=search)

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Phone':<16} {'Points':>8}")
    click.echo("-" * 57)
    for c in customers:
        click.echo(f"{c.id:<6} {c.name:<24} {c.phone:<16} {c.loyalty_points:>8}")
