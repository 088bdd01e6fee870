"""Application service: List Products use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class ProductLineDTO:
    id: int
    name: str
    category: str
    selling_price: str
    gst_percent: str
    stock: int
    low_stock: bool


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, low_stock_only: bool = False) -> list[ProductLineDTO]:
        with self._uow as uow:
            products = uow.products.list_all()

        if low_stock_only:
            products = [p for p in products if p.is_low_stock]

        return [
            ProductLineDTO(
                id=p.id,  # type: ignore[arg-type]
                name=p.name,
                category=p.category,
                selling_price=str(p.selling_price),
                gst_percent=f"{p.gst_percent}%",
                stock=p.stock,
                low_stock=p.is_low_stock,
            )
            for p in products
        ]
