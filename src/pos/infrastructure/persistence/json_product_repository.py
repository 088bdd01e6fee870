"""JSON-backed implementation of ProductRepository.

Operates on the ``products`` section of a loaded store document; the
unit of work decides when that document reaches disk.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pos.domain.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from pos.domain.model.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(r["id"] for r in self._records) + 1

    def get_by_id(self, product_id: int) -> Product | None:
        raw = self._find(product_id)
        return self._to_domain(raw) if raw is not None else None

    def decrement_stock(self, product_id: int, amount: int) -> Product:
        raw = self._find(product_id)
        if raw is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        product = self._to_domain(raw)
        product.deduct_stock(amount)
        raw["stock"] = product.stock
        return product

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        if product.id is None:
            product.id = self.next_id()
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    def _find(self, product_id: int) -> dict | None:
        for raw in self._records:
            if raw.get("id") == product_id:
                return raw
        return None

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "category": product.category,
            "size": product.size,
            "color": product.color,
            "stock": product.stock,
            "low_stock_threshold": product.low_stock_threshold,
            "cost_price": str(product.cost_price.amount),
            "selling_price": str(product.selling_price.amount),
            "gst_percent": str(product.gst_percent),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        try:
            return Product(
                id=raw["id"],
                name=raw["name"],
                sku=raw.get("sku"),
                category=raw.get("category", ""),
                size=raw.get("size"),
                color=raw.get("color"),
                stock=raw.get("stock", 0),
                low_stock_threshold=raw.get("low_stock_threshold", DEFAULT_LOW_STOCK_THRESHOLD),
                cost_price=Money(Decimal(raw["cost_price"])),
                selling_price=Money(Decimal(raw["selling_price"])),
                gst_percent=Decimal(raw.get("gst_percent", "0")),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation, ValidationError) as exc:
            raise PersistenceError(
                f"Malformed product record #{raw.get('id', '?')}: {exc!r}"
            ) from exc
