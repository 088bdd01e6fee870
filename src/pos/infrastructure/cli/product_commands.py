"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from pos.application.add_product import AddProductHandler
from pos.application.list_products import ListProductsHandler, ProductLineDTO
from pos.application.restock_product import RestockProductHandler
from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--category", required=True, help="Category (e.g. Sarees).")
@click.option("--price", required=True, help="Selling price (e.g. 1499.00).")
@click.option("--cost", required=True, help="Cost price.")
@click.option("--stock", default=0, type=int, show_default=True, help="Opening stock.")
@click.option("--gst", default="0", show_default=True, help="GST percent.")
@click.option("--sku", default=None, help="Stock keeping unit.")
@click.option("--size", default=None)
@click.option("--color", default=None)
def product_add(
    name: str,
    category: str,
    price: str,
    cost: str,
    stock: int,
    gst: str,
    sku: str | None,
    size: str | None,
    color: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(
            name=name,
            category=category,
            selling_price=price,
            cost_price=cost,
            stock=stock,
            gst_percent=gst,
            sku=sku,
            size=size,
            color=color,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.selling_price} "
        f"({product.stock} in stock)"
    )


def _print_products(lines: list[ProductLineDTO]) -> None:
    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<14} {'Price':>12} {'GST':>6} {'Stock':>6}")
    click.echo("-" * 73)
    for p in lines:
        flag = "  LOW" if p.low_stock else ""
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.category:<14} {p.selling_price:>12} "
            f"{p.gst_percent:>6} {p.stock:>6}{flag}"
        )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    lines = ListProductsHandler(uow=unit_of_work()).handle()

    if not lines:
        click.echo("No products found.")
        return
    _print_products(lines)


@click.command("low-stock")
def product_low_stock() -> None:
    """List products at or below their low-stock threshold."""
    lines = ListProductsHandler(uow=unit_of_work()).handle(low_stock_only=True)

    if not lines:
        click.echo("No products are low on stock.")
        return
    _print_products(lines)


@click.command("restock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
def product_restock(product_id: int, quantity: int) -> None:
    """Add received units to a product's stock."""
    handler = RestockProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' now has {product.stock} in stock")
