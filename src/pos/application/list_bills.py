"""Application service: List Bills use case (query).

Filters by an inclusive date range and payment mode; newest first.
A bare end date covers that whole day.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from pos.application.dto import BillDTO
from pos.domain.exceptions import ValidationError
from pos.domain.model.bill import PaymentMode
from pos.domain.repository.unit_of_work import UnitOfWork


class ListBillsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        start: date | None = None,
        end: date | None = None,
        payment_mode: str | None = None,
    ) -> list[BillDTO]:
        start_at = _as_utc(start, time.min)
        end_at = _as_utc(end, time.max)
        if start_at and end_at and start_at > end_at:
            raise ValidationError("Start date must not be after end date")

        mode = PaymentMode.parse(payment_mode) if payment_mode else None

        with self._uow as uow:
            bills = uow.bills.list_bills(start=start_at, end=end_at, payment_mode=mode)
        return [BillDTO.from_bill(b) for b in bills]


def _as_utc(value: date | None, at: time) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, at, tzinfo=timezone.utc)
