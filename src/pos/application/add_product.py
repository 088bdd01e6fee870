"""Application service: Add Product use case."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pos.domain.exceptions import ValidationError
from pos.domain.model.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        category: str,
        selling_price: str,
        cost_price: str,
        stock: int = 0,
        gst_percent: str = "0",
        sku: str | None = None,
        size: str | None = None,
        color: str | None = None,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not category or not category.strip():
            raise ValidationError("Product category is required")

        try:
            gst = Decimal(str(gst_percent))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid GST percent: {gst_percent!r}") from exc

        with self._uow as uow:
            if sku and any(p.sku == sku for p in uow.products.list_all()):
                raise ValidationError(f"SKU '{sku}' already exists")

            product = Product(
                id=uow.products.next_id(),
                name=name.strip(),
                category=category.strip(),
                selling_price=Money.of(selling_price),
                cost_price=Money.of(cost_price),
                stock=stock,
                gst_percent=gst,
                sku=sku,
                size=size,
                color=color,
                low_stock_threshold=low_stock_threshold,
            )
            uow.products.save(product)
            uow.commit()

        return product
