"""Domain service: Stock Reservation.

Takes the units on each line of a cart out of the product ledger.
It lives in the domain layer because the per-item check-then-deduct is
a core business rule, not just orchestration.

Each deduction goes through the repository's compare-and-decrement, and
the whole loop runs inside the checkout's unit of work, so a failure on
the third line leaves the first two lines' stock untouched once the
unit of work rolls back.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.bill import LineItem
from pos.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def deduct_for_items(self, items: list[LineItem]) -> list[LineItem]:
        """Deduct stock for every line item, in input order.

        Raises EntityNotFoundError or InsufficientStockError naming the
        offending product on the first line that cannot be served.
        Returns the line items, with the catalog name filled in on any
        line that arrived without one.
        """
        deducted: list[LineItem] = []

        for line in items:
            label = line.product_name or f"#{line.product_id}"
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found: {label}")

            updated = self._product_repo.decrement_stock(
                line.product_id, line.quantity.value
            )
            logger.debug(
                "Deducted %d x %s, %d left", line.quantity.value, updated.name, updated.stock
            )

            if not line.product_name:
                line = replace(line, product_name=product.name)
            deducted.append(line)

        return deducted
