"""Unit tests for the StockReservationService domain service."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import EntityNotFoundError, InsufficientStockError
from pos.domain.model.bill import LineItem
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.service.stock_reservation_service import StockReservationService
from tests.fakes import FakeProductRepository


def _product(pid: int, name: str, stock: int) -> Product:
    return Product(
        id=pid,
        name=name,
        category="Sarees",
        selling_price=Money.of("1000"),
        cost_price=Money.of("600"),
        stock=stock,
        gst_percent=Decimal("5"),
    )


def _line(pid: int, qty: int, name: str = "") -> LineItem:
    price = Money.of("1000")
    return LineItem(pid, name, Quantity(qty), price, price * qty)


def _setup():
    repo = FakeProductRepository([
        _product(1, "Silk Saree", 5),
        _product(2, "Chiffon Dupatta", 2),
    ])
    return StockReservationService(repo), repo


class TestDeductForItems:

    def test_deducts_each_line(self):
        svc, repo = _setup()
        svc.deduct_for_items([_line(1, 2, "Silk Saree"), _line(2, 1, "Chiffon Dupatta")])
        assert repo.get_by_id(1).stock == 3
        assert repo.get_by_id(2).stock == 1

    def test_same_product_on_two_lines(self):
        svc, repo = _setup()
        svc.deduct_for_items([_line(1, 2), _line(1, 3)])
        assert repo.get_by_id(1).stock == 0

    def test_fills_in_missing_product_name(self):
        svc, _ = _setup()
        lines = svc.deduct_for_items([_line(2, 1)])
        assert lines[0].product_name == "Chiffon Dupatta"

    def test_keeps_caller_name_snapshot(self):
        svc, _ = _setup()
        lines = svc.deduct_for_items([_line(1, 1, "Silk Saree (festive)")])
        assert lines[0].product_name == "Silk Saree (festive)"

    def test_unknown_product_named_in_error(self):
        svc, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found: Linen Shirt"):
            svc.deduct_for_items([_line(99, 1, "Linen Shirt")])

    def test_insufficient_stock_named_in_error(self):
        svc, repo = _setup()
        with pytest.raises(InsufficientStockError, match="Chiffon Dupatta"):
            svc.deduct_for_items([_line(2, 3)])
        assert repo.get_by_id(2).stock == 2

    def test_stops_at_first_failing_line(self):
        svc, repo = _setup()
        with pytest.raises(InsufficientStockError):
            svc.deduct_for_items([_line(1, 1), _line(2, 5), _line(1, 1)])
        # Rolling back the first line is the unit of work's job.
        assert repo.get_by_id(1).stock == 4
