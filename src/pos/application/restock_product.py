"""Application service: Restock Product use case."""

from __future__ import annotations

from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.product import Product
from pos.domain.repository.unit_of_work import UnitOfWork


class RestockProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, quantity: int) -> Product:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")
            product.restock(quantity)
            uow.products.save(product)
            uow.commit()
        return product
