from __future__ import annotations

import click

from pos.infrastructure.bootstrap import settings
from pos.infrastructure.cli.bill_commands import (
    bill_checkout,
    bill_list,
    bill_show,
    bill_summary,
)
from pos.infrastructure.cli.customer_commands import customer_add, customer_list
from pos.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_low_stock,
    product_restock,
)
from pos.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override POS_LOG_LEVEL (e.g. INFO).")
def cli(log_level: str | None) -> None:
    """POS: boutique point of sale"""
    configure_logging(log_level or settings().log_level)


@cli.group()
def bill() -> None:
    """Check out carts and look up bills."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def customer() -> None:
    """Manage customers."""


# Register subcommands
bill.add_command(bill_checkout)
bill.add_command(bill_list)
bill.add_command(bill_show)
bill.add_command(bill_summary)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_low_stock)
product.add_command(product_restock)
customer.add_command(customer_add)
customer.add_command(customer_list)
