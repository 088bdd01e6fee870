"""Abstract repository for the Bill aggregate (the bill ledger).

Bills are insert-only: there is deliberately no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from pos.domain.model.bill import Bill, PaymentMode


class BillRepository(ABC):

    @abstractmethod
    def get_last_invoice_number(self) -> str | None:
        """Return the invoice number of the most recently inserted bill."""

    @abstractmethod
    def insert(self, bill: Bill) -> Bill:
        """Persist a new bill and return it with its assigned ID.

        Raises PersistenceError if the invoice number is already taken.
        """

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None:
        """Return a bill by its ID, or None if not found."""

    @abstractmethod
    def list_bills(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        payment_mode: PaymentMode | None = None,
    ) -> list[Bill]:
        """Return bills in the inclusive date range, newest first."""
