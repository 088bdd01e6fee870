"""Integration tests for the ShowBill and ListBills use cases."""

from datetime import date, datetime, timezone

import pytest

from pos.application.list_bills import ListBillsHandler
from pos.application.show_bill import ShowBillHandler
from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.bill import PaymentMode
from tests.builders import make_bill
from tests.fakes import FakeUnitOfWork


def _uow() -> FakeUnitOfWork:
    return FakeUnitOfWork(bills=[
        make_bill(1, "DB2025-001", datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)),
        make_bill(2, "DB2025-002", datetime(2025, 3, 2, 23, 59, tzinfo=timezone.utc),
                  payment_mode=PaymentMode.UPI),
        make_bill(3, "DB2025-003", datetime(2025, 3, 5, 9, 0, tzinfo=timezone.utc)),
    ])


class TestShowBill:

    def test_show(self):
        dto = ShowBillHandler(_uow()).handle(2)
        assert dto.invoice_number == "DB2025-002"
        assert dto.total_amount == "₹525.00"
        assert dto.payment_mode == "upi"
        assert dto.items[0].product_name == "Cotton Kurti"
        assert dto.created_at == "2025-03-02 23:59 UTC"

    def test_missing_bill(self):
        with pytest.raises(EntityNotFoundError, match="Bill #9"):
            ShowBillHandler(_uow()).handle(9)


class TestListBills:

    def test_newest_first(self):
        bills = ListBillsHandler(_uow()).handle()
        assert [b.invoice_number for b in bills] == ["DB2025-003", "DB2025-002", "DB2025-001"]

    def test_end_date_covers_whole_day(self):
        bills = ListBillsHandler(_uow()).handle(start=date(2025, 3, 2), end=date(2025, 3, 2))
        assert [b.invoice_number for b in bills] == ["DB2025-002"]

    def test_payment_mode_filter(self):
        bills = ListBillsHandler(_uow()).handle(payment_mode="cash")
        assert [b.invoice_number for b in bills] == ["DB2025-003", "DB2025-001"]

    def test_reversed_range_rejected(self):
        with pytest.raises(ValidationError, match="Start date"):
            ListBillsHandler(_uow()).handle(start=date(2025, 3, 5), end=date(2025, 3, 1))
