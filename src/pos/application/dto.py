"""Data Transfer Objects: plain containers that cross layer boundaries.

Inputs arrive loosely typed (amounts as strings, Decimals or numbers,
exactly as a web form or CLI would hand them over); the handlers turn
them into domain value objects.  Outputs are display-ready strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from pos.domain.model.bill import Bill

Amount = Union[str, int, float, Decimal]

WALK_IN_CUSTOMER = "Walk-in Customer"


@dataclass(frozen=True)
class CartItem:
    """Input: one line of a cart as priced by the caller."""

    product_id: int
    quantity: int
    unit_price: Amount
    product_name: str = ""
    line_total: Amount | None = None


@dataclass(frozen=True)
class CartRequest:
    """Input: a complete sale submitted for checkout.

    The financial totals are the caller's figures; checkout stores them
    as given unless total verification is switched on.
    """

    customer_name: str
    items: list[CartItem]
    subtotal: Amount | None
    gst_amount: Amount | None
    total_amount: Amount | None
    payment_mode: str | None
    created_by: str = ""
    customer_id: int | None = None
    customer_phone: str | None = None
    discount: Amount = 0
    loyalty_points_redeemed: int = 0
    loyalty_points_earned: int = 0


@dataclass(frozen=True)
class ItemSpec:
    """Input: what the cashier scanned (product id + quantity)."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class BillLineDTO:
    product_name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class BillDTO:
    """Output: a bill as displayed to the user."""

    id: int
    invoice_number: str
    customer_name: str
    customer_phone: str | None
    items: list[BillLineDTO]
    subtotal: str
    discount: str
    gst_amount: str
    loyalty_points_redeemed: int
    loyalty_points_earned: int
    total_amount: str
    payment_mode: str
    created_by: str
    created_at: str

    @staticmethod
    def from_bill(bill: Bill) -> BillDTO:
        return BillDTO(
            id=bill.id,  # type: ignore[arg-type]
            invoice_number=bill.invoice_number,
            customer_name=bill.customer_name,
            customer_phone=bill.customer_phone,
            items=[
                BillLineDTO(
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                )
                for item in bill.items
            ],
            subtotal=str(bill.subtotal),
            discount=str(bill.discount),
            gst_amount=str(bill.gst_amount),
            loyalty_points_redeemed=bill.loyalty_points_redeemed,
            loyalty_points_earned=bill.loyalty_points_earned,
            total_amount=str(bill.total_amount),
            payment_mode=bill.payment_mode.value,
            created_by=bill.created_by,
            created_at=bill.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
