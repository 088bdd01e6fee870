"""Domain service: Invoice Numbering.

Allocates the next invoice number from the last one in the bill ledger.
The read and the later insert both happen inside the checkout's
exclusive unit of work, which is what keeps the sequence gapless and
free of duplicates.
"""

from __future__ import annotations

from pos.domain.model.bill import InvoiceNumber
from pos.domain.repository.bill_repository import BillRepository


class InvoiceNumberingService:

    def __init__(self, bill_repo: BillRepository, tag: str) -> None:
        self._bill_repo = bill_repo
        self._tag = tag

    def next_number(self) -> InvoiceNumber:
        """Return the invoice number for the bill about to be inserted.

        The sequence continues from the trailing number of the last
        invoice even when the tag (e.g. the year) has changed.
        """
        last = self._bill_repo.get_last_invoice_number()
        if not last:
            return InvoiceNumber.first(self._tag)
        sequence = InvoiceNumber.parse_sequence(last)
        return InvoiceNumber(tag=self._tag, sequence=sequence + 1)
