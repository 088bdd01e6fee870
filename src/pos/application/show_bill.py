"""Application service: Show Bill use case (query)."""

from __future__ import annotations

from pos.application.dto import BillDTO
from pos.domain.exceptions import EntityNotFoundError
from pos.domain.repository.unit_of_work import UnitOfWork


class ShowBillHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, bill_id: int) -> BillDTO:
        with self._uow as uow:
            bill = uow.bills.get_by_id(bill_id)
        if bill is None:
            raise EntityNotFoundError(f"Bill #{bill_id} not found")
        return BillDTO.from_bill(bill)
