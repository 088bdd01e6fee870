"""Product aggregate.

Products live independently of bills.  Checkout is the only operation
that takes stock away; catalog edits never touch past bills because
every bill keeps its own name and price snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.domain.exceptions import InsufficientStockError, ValidationError
from pos.domain.model.value_objects import Money

DEFAULT_LOW_STOCK_THRESHOLD = 10


@dataclass
class Product:
    """A sellable unit in the boutique catalog.

    Invariants:
    - ``stock`` is never negative
    """

    id: int | None
    name: str
    category: str
    selling_price: Money
    cost_price: Money
    stock: int = 0
    gst_percent: Decimal = Decimal("0")
    sku: str | None = None
    size: str | None = None
    color: str | None = None
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")
        if self.gst_percent < 0:
            raise ValidationError("GST percent cannot be negative")

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def deduct_stock(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock for a sale.

        Raises InsufficientStockError (leaving stock untouched) if fewer
        units are on hand.
        """
        if quantity <= 0:
            raise ValidationError("Deduction quantity must be positive")
        if self.stock < quantity:
            raise InsufficientStockError(self.name, quantity, self.stock)
        self.stock -= quantity

    def restock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock += quantity
