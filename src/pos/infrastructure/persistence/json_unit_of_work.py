"""JSON-file-backed implementation of UnitOfWork.

``__enter__`` takes the store lock and loads a private copy of the
document; the repositories work on that copy.  ``commit()`` writes it
back in one atomic replace.  Anything not committed is simply dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pos.domain.repository.unit_of_work import UnitOfWork
from pos.infrastructure.persistence.json_bill_repository import JsonBillRepository
from pos.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from pos.infrastructure.persistence.json_store import JsonStore

logger = logging.getLogger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path)
        self._doc: dict | None = None
        self._committed = False

    def _begin(self) -> None:
        self._store.acquire()
        try:
            self._doc = self._store.load()
        except Exception:
            self._store.release()
            raise
        self._committed = False
        self.products = JsonProductRepository(self._doc["products"])
        self.customers = JsonCustomerRepository(self._doc["customers"])
        self.bills = JsonBillRepository(self._doc["bills"])

    def commit(self) -> None:
        if self._doc is None:
            raise RuntimeError("commit() called outside a unit of work")
        self._store.save(self._doc)
        self._committed = True
        logger.debug("Committed %s", self._store.file_path)

    def rollback(self) -> None:
        if self._doc is not None and not self._committed:
            logger.debug("Rolled back uncommitted changes to %s", self._store.file_path)
        self._doc = None

    def _end(self) -> None:
        self._store.release()
