"""Bill aggregate, the immutable record of one completed sale.

A Bill is created exactly once by the checkout and never edited, voided
or deleted afterwards.  Product names, prices and the customer's name
and phone are stored as they were at the time of sale.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money, Quantity


class PaymentMode(Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str) -> PaymentMode:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(
                f"Invalid payment mode {raw!r} (expected one of: {allowed})"
            ) from None


@dataclass(frozen=True)
class LineItem:
    """One product line on a bill, snapshotted at sale time."""

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money
    line_total: Money


# ---------------------------------------------------------------------------
# Invoice numbering
# ---------------------------------------------------------------------------
INVOICE_SEQUENCE_WIDTH = 3
_TRAILING_DIGITS = re.compile(r"(\d+)$")


@dataclass(frozen=True)
class InvoiceNumber:
    """Human-readable invoice number such as ``DB2025-004``.

    ``tag`` is the store prefix joined with the year; ``sequence`` is the
    running counter, zero-padded to three digits (it simply grows wider
    past 999).
    """

    tag: str
    sequence: int

    def __post_init__(self) -> None:
        if self.sequence <= 0:
            raise ValidationError("Invoice sequence must be positive")

    @staticmethod
    def first(tag: str) -> InvoiceNumber:
        return InvoiceNumber(tag=tag, sequence=1)

    @staticmethod
    def parse_sequence(raw: str) -> int:
        """Return the trailing numeric segment of an existing invoice number."""
        match = _TRAILING_DIGITS.search(raw.strip())
        if match is None:
            raise ValidationError(f"Invoice number {raw!r} has no numeric sequence")
        return int(match.group(1))

    def __str__(self) -> str:
        return f"{self.tag}-{self.sequence:0{INVOICE_SEQUENCE_WIDTH}d}"


@dataclass(frozen=True)
class Bill:
    """Aggregate root for a completed sale.

    Frozen: the only way to get a different Bill is ``dataclasses.replace``,
    which the repository uses once to attach the storage id on insert.
    """

    id: int | None
    invoice_number: str
    customer_id: int | None
    customer_name: str
    customer_phone: str | None
    items: tuple[LineItem, ...]
    subtotal: Money
    discount: Money
    gst_amount: Money
    loyalty_points_redeemed: int
    loyalty_points_earned: int
    total_amount: Money
    payment_mode: PaymentMode
    created_by: str
    created_at: datetime

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
