"""Abstract unit of work spanning the three ledgers.

Checkout touches products, customers and bills.  All of it has to land
together or not at all, and concurrent checkouts must not interleave
their read-modify-write steps, so the repositories are only handed out
inside an exclusive unit of work:

    with uow:
        uow.products.decrement_stock(...)
        uow.bills.insert(...)
        uow.commit()

Leaving the block without ``commit()`` (or through an exception) rolls
every change back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.repository.bill_repository import BillRepository
from pos.domain.repository.customer_repository import CustomerRepository
from pos.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    products: ProductRepository
    customers: CustomerRepository
    bills: BillRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since ``__enter__`` durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes.  A no-op after ``commit()``."""

    @abstractmethod
    def _begin(self) -> None:
        """Acquire the exclusive lock and load a working snapshot."""

    @abstractmethod
    def _end(self) -> None:
        """Release the lock."""
