"""Unit tests for the Product aggregate."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import InsufficientStockError, ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money


def _kurti(stock: int = 5) -> Product:
    return Product(
        id=1,
        name="Cotton Kurti",
        category="Kurtis",
        selling_price=Money.of("500"),
        cost_price=Money.of("300"),
        stock=stock,
        gst_percent=Decimal("5"),
    )


class TestDeductStock:

    def test_deduct_reduces_stock(self):
        product = _kurti(stock=5)
        product.deduct_stock(2)
        assert product.stock == 3

    def test_deduct_entire_stock(self):
        product = _kurti(stock=2)
        product.deduct_stock(2)
        assert product.stock == 0

    def test_deduct_more_than_stock_rejected_and_unchanged(self):
        product = _kurti(stock=1)
        with pytest.raises(InsufficientStockError, match="Cotton Kurti") as exc_info:
            product.deduct_stock(2)
        assert exc_info.value.requested == 2
        assert exc_info.value.available == 1
        assert product.stock == 1

    def test_deduct_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _kurti().deduct_stock(0)


class TestProductInvariants:

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _kurti(stock=-1)

    def test_restock(self):
        product = _kurti(stock=5)
        product.restock(10)
        assert product.stock == 15

    def test_low_stock_at_threshold(self):
        assert _kurti(stock=10).is_low_stock
        assert not _kurti(stock=11).is_low_stock
