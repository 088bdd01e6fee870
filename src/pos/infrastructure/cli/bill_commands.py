"""CLI commands for checkout and the Bill aggregate."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

import click

from pos.application.dto import BillDTO, ItemSpec
from pos.application.list_bills import ListBillsHandler
from pos.application.quote_cart import QuoteCartHandler
from pos.application.sales_summary import PERIODS, SalesSummaryHandler
from pos.application.show_bill import ShowBillHandler
from pos.domain.exceptions import DomainException
from pos.domain.model.bill import PaymentMode
from pos.infrastructure.bootstrap import checkout_handler, settings, unit_of_work


def _parse_items(raw: str) -> list[ItemSpec]:
    """Parse '3:2,7:1' (product id : quantity) into ItemSpec list."""
    specs: list[ItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        id_str, qty_str = pair.split(":", 1)
        try:
            product_id = int(id_str)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid item '{pair}'. Both parts must be integers.")
        specs.append(ItemSpec(product_id=product_id, quantity=qty))
    return specs


def _display_bill(dto: BillDTO) -> None:
    """Shared formatting for displaying a bill."""
    click.echo(f"Invoice {dto.invoice_number}  (bill #{dto.id})")
    customer = dto.customer_name
    if dto.customer_phone:
        customer += f"  ({dto.customer_phone})"
    click.echo(f"Customer: {customer}")
    click.echo(f"Created:  {dto.created_at} by staff {dto.created_by}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<31} {dto.subtotal:>24}")
    click.echo(f"  {'GST':<31} {dto.gst_amount:>24}")
    click.echo(f"  {'Discount':<31} {'-' + dto.discount:>24}")
    if dto.loyalty_points_redeemed:
        click.echo(f"  {'Points redeemed':<31} {dto.loyalty_points_redeemed:>24}")
    click.echo(f"  {'Total':<31} {dto.total_amount:>24}")
    click.echo(f"  Paid by {dto.payment_mode}; {dto.loyalty_points_earned} point(s) earned")


@click.command("checkout")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option(
    "--payment",
    "payment_mode",
    required=True,
    type=click.Choice([m.value for m in PaymentMode], case_sensitive=False),
    help="Payment mode.",
)
@click.option("--customer-id", type=int, default=None, help="Registered customer ID.")
@click.option("--customer-name", default="", help="Name printed on the bill.")
@click.option("--phone", "customer_phone", default=None, help="Customer phone.")
@click.option("--gst", "gst_rate", default=None, help="Flat GST percent on the subtotal.")
@click.option("--discount", default="0", show_default=True, help="Discount in rupees.")
@click.option("--redeem", "redeem_points", default=0, type=int, help="Loyalty points to redeem.")
@click.option("--staff", default=None, help="Staff identifier (defaults to POS_STAFF_ID).")
def bill_checkout(
    items: str,
    payment_mode: str,
    customer_id: int | None,
    customer_name: str,
    customer_phone: str | None,
    gst_rate: str | None,
    discount: str,
    redeem_points: int,
    staff: str | None,
) -> None:
    """Price a cart, deduct stock and issue the bill."""
    specs = _parse_items(items)

    gst_percent = None
    if gst_rate is not None:
        try:
            gst_percent = Decimal(gst_rate)
        except InvalidOperation:
            raise click.BadParameter(f"Invalid GST percent '{gst_rate}'.")

    try:
        cart = QuoteCartHandler(uow=unit_of_work()).handle(
            item_specs=specs,
            payment_mode=payment_mode,
            created_by=staff or settings().staff_id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            gst_percent=gst_percent,
            discount=discount,
            redeem_points=redeem_points,
        )
        bill = checkout_handler().handle(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_bill(BillDTO.from_bill(bill))


@click.command("show")
@click.option("--id", "bill_id", required=True, type=int, help="Bill ID to display.")
def bill_show(bill_id: int) -> None:
    """Show an issued bill."""
    handler = ShowBillHandler(uow=unit_of_work())

    try:
        dto = handler.handle(bill_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_bill(dto)


@click.command("list")
@click.option("--from", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--to", "end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option(
    "--payment",
    "payment_mode",
    type=click.Choice([m.value for m in PaymentMode], case_sensitive=False),
    default=None,
)
def bill_list(start: datetime | None, end: datetime | None, payment_mode: str | None) -> None:
    """List bills, newest first."""
    handler = ListBillsHandler(uow=unit_of_work())

    try:
        bills = handler.handle(
            start=start.date() if start else None,
            end=end.date() if end else None,
            payment_mode=payment_mode,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not bills:
        click.echo("No bills found.")
        return

    click.echo(f"{'Invoice':<14} {'Date':<22} {'Customer':<24} {'Payment':<8} {'Total':>12}")
    click.echo("-" * 84)
    for b in bills:
        click.echo(
            f"{b.invoice_number:<14} {b.created_at:<22} {b.customer_name:<24} "
            f"{b.payment_mode:<8} {b.total_amount:>12}"
        )


@click.command("summary")
@click.option(
    "--period",
    type=click.Choice(list(PERIODS), case_sensitive=False),
    default="today",
    show_default=True,
    help="How far back to report.",
)
def bill_summary(period: str) -> None:
    """Summarise sales for today, the past week or the past month."""
    handler = SalesSummaryHandler(uow=unit_of_work())

    try:
        summary = handler.handle(period)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales since {summary.since} ({summary.period})")
    click.echo(f"  {'Total sales':<20} {summary.total_sales:>14}")
    click.echo(f"  {'Bills':<20} {summary.bill_count:>14}")
    click.echo(f"  {'Discount given':<20} {summary.total_discount:>14}")
    click.echo(f"  {'GST collected':<20} {summary.total_gst:>14}")
    click.echo(
        f"  Catalog: {summary.product_count} product(s), {summary.low_stock_count} low on stock; "
        f"{summary.customer_count} customer(s)"
    )

    if summary.payment_modes:
        click.echo()
        click.echo("By payment mode:")
        for mode, amount in summary.payment_modes.items():
            click.echo(f"  {mode:<20} {amount:>14}")

    if summary.daily_sales:
        click.echo()
        click.echo("By day:")
        for day in summary.daily_sales:
            click.echo(f"  {day.date:<12} {day.bills:>4} bill(s) {day.sales:>14}")

    if summary.top_products:
        click.echo()
        click.echo("Top products:")
        for p in summary.top_products:
            click.echo(f"  {p.product_name:<24} {p.quantity:>5} {p.revenue:>14}")
