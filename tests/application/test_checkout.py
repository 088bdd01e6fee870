"""Integration tests for the Checkout use case.

Uses the in-memory fake unit of work, no file I/O.
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pos.application.checkout import CheckoutHandler
from pos.application.dto import CartItem, CartRequest
from pos.domain.exceptions import (
    EntityNotFoundError,
    InsufficientPointsError,
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from pos.domain.model.bill import PaymentMode
from pos.domain.model.customer import Customer
from tests.builders import make_customer, make_product
from tests.fakes import FakeUnitOfWork

FIXED_NOW = datetime(2025, 3, 14, 11, 30, tzinfo=timezone.utc)


def _setup(stock: int = 5, points: int = 50, verify_totals: bool = False):
    uow = FakeUnitOfWork(
        products=[
            make_product(1, "Cotton Kurti", stock=stock, price="500"),
            make_product(2, "Silk Dupatta", stock=10, price="800"),
        ],
        customers=[make_customer(7, points)],
    )
    handler = CheckoutHandler(
        uow, invoice_tag="DB2025", verify_totals=verify_totals, clock=lambda: FIXED_NOW
    )
    return handler, uow


def _cart(**overrides) -> CartRequest:
    cart = CartRequest(
        customer_name="Walk-in Customer",
        items=[CartItem(product_id=1, product_name="Cotton Kurti", quantity=2,
                        unit_price=500, line_total=1000)],
        subtotal=1000,
        gst_amount=50,
        total_amount=1050,
        payment_mode="cash",
        created_by="3",
    )
    return replace(cart, **overrides)


class TestCheckoutHappyPath:

    def test_walk_in_sale(self):
        handler, uow = _setup(stock=5)

        bill = handler.handle(_cart())

        assert bill.id == 1
        assert bill.invoice_number == "DB2025-001"
        assert bill.total_amount.amount == Decimal("1050")
        assert bill.payment_mode == PaymentMode.CASH
        assert bill.customer_id is None
        assert uow.products.get_by_id(1).stock == 3

    def test_bill_is_persisted_with_server_fields(self):
        handler, uow = _setup()

        bill = handler.handle(_cart())

        stored = uow.bills.get_by_id(bill.id)
        assert stored == bill
        assert stored.created_at == FIXED_NOW
        assert stored.created_by == "3"
        assert uow.commits == 1

    def test_other_products_untouched(self):
        handler, uow = _setup()
        handler.handle(_cart())
        assert uow.products.get_by_id(2).stock == 10

    def test_invoice_numbers_are_sequential(self):
        handler, uow = _setup(stock=100)

        numbers = [handler.handle(_cart()).invoice_number for _ in range(12)]

        assert numbers == [f"DB2025-{n:03d}" for n in range(1, 13)]

    def test_same_cart_twice_creates_two_bills(self):
        handler, uow = _setup(stock=5)

        first = handler.handle(_cart())
        second = handler.handle(_cart())

        assert first.invoice_number != second.invoice_number
        assert uow.products.get_by_id(1).stock == 1
        assert len(uow.bills.all()) == 2

    def test_snapshots_caller_name_and_prices(self):
        handler, uow = _setup()

        bill = handler.handle(_cart(items=[
            CartItem(product_id=1, product_name="Kurti (Diwali offer)", quantity=1,
                     unit_price="450.00", line_total="450.00"),
        ], subtotal="450", gst_amount="22.50", total_amount="472.50"))

        line = uow.bills.get_by_id(bill.id).items[0]
        assert line.product_name == "Kurti (Diwali offer)"
        assert str(line.unit_price) == "₹450.00"

    def test_missing_line_total_computed_from_price(self):
        handler, _ = _setup()
        bill = handler.handle(_cart(items=[CartItem(product_id=2, quantity=3, unit_price="800")]))
        assert bill.items[0].line_total.amount == Decimal("2400")
        assert bill.items[0].product_name == "Silk Dupatta"

    def test_caller_totals_stored_as_given(self):
        handler, _ = _setup()
        bill = handler.handle(_cart(subtotal=1, gst_amount=0, total_amount=1))
        assert bill.total_amount.amount == Decimal("1")


class TestCheckoutStock:

    def test_insufficient_stock_rejected(self):
        handler, uow = _setup(stock=1)

        with pytest.raises(InsufficientStockError, match="Cotton Kurti"):
            handler.handle(_cart())

        assert uow.products.get_by_id(1).stock == 1
        assert uow.bills.all() == []

    def test_failure_on_later_item_rolls_back_earlier_items(self):
        handler, uow = _setup(stock=1)

        with pytest.raises(InsufficientStockError):
            handler.handle(_cart(items=[
                CartItem(product_id=2, product_name="Silk Dupatta", quantity=4, unit_price=800),
                CartItem(product_id=1, product_name="Cotton Kurti", quantity=2, unit_price=500),
            ]))

        assert uow.products.get_by_id(2).stock == 10
        assert uow.products.get_by_id(1).stock == 1
        assert uow.commits == 0

    def test_unknown_product_rejected(self):
        handler, uow = _setup()

        with pytest.raises(NotFoundError, match="Product not found: Linen Shirt"):
            handler.handle(_cart(items=[
                CartItem(product_id=1, product_name="Cotton Kurti", quantity=1, unit_price=500),
                CartItem(product_id=42, product_name="Linen Shirt", quantity=1, unit_price=900),
            ]))

        assert uow.products.get_by_id(1).stock == 5
        assert uow.bills.all() == []

    def test_not_found_alias(self):
        assert NotFoundError is EntityNotFoundError


class TestCheckoutLoyalty:

    def test_redeem_and_earn(self):
        handler, uow = _setup(points=50)

        bill = handler.handle(_cart(
            customer_id=7, customer_name="Meera Iyer", customer_phone="9876543210",
            total_amount=1020, loyalty_points_redeemed=30, loyalty_points_earned=10,
        ))

        assert uow.customers.get_by_id(7).loyalty_points == 30
        assert bill.loyalty_points_redeemed == 30
        assert bill.loyalty_points_earned == 10
        assert bill.customer_phone == "9876543210"

    def test_redeem_more_than_balance_rejected(self):
        handler, uow = _setup(points=50)

        with pytest.raises(InsufficientPointsError):
            handler.handle(_cart(customer_id=7, loyalty_points_redeemed=80))

        assert uow.customers.get_by_id(7).loyalty_points == 50

    def test_points_failure_rolls_back_stock(self):
        handler, uow = _setup(stock=5, points=50)

        with pytest.raises(InsufficientPointsError):
            handler.handle(_cart(customer_id=7, loyalty_points_redeemed=80))

        assert uow.products.get_by_id(1).stock == 5
        assert uow.bills.all() == []

    def test_unknown_customer_skips_points(self):
        handler, uow = _setup()

        bill = handler.handle(_cart(customer_id=99, loyalty_points_earned=10))

        assert bill.customer_id == 99
        assert uow.customers.get_by_id(7).loyalty_points == 50

    def test_no_customer_leaves_points_alone(self):
        handler, uow = _setup(points=50)
        handler.handle(_cart(loyalty_points_earned=10))
        assert uow.customers.get_by_id(7).loyalty_points == 50

    def test_balance_rule_applied_by_customer(self, monkeypatch):
        handler, uow = _setup(points=50)
        calls = []
        reconcile = Customer.reconcile_loyalty

        def recording(customer, redeemed, earned):
            calls.append((customer.id, redeemed, earned))
            reconcile(customer, redeemed, earned)

        monkeypatch.setattr(Customer, "reconcile_loyalty", recording)

        handler.handle(_cart(customer_id=7, loyalty_points_redeemed=20, loyalty_points_earned=10))

        assert calls == [(7, 20, 10)]
        assert uow.customers.get_by_id(7).loyalty_points == 40

    def test_equal_redeem_and_earn_keeps_balance(self):
        handler, uow = _setup(points=50)
        handler.handle(_cart(customer_id=7, loyalty_points_redeemed=10, loyalty_points_earned=10))
        assert uow.customers.get_by_id(7).loyalty_points == 50


class TestCheckoutValidation:

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"items": []}, "at least one item"),
            ({"customer_name": "  "}, "Customer name is required"),
            ({"subtotal": None}, "Subtotal is required"),
            ({"gst_amount": None}, "GST amount is required"),
            ({"total_amount": ""}, "Total amount is required"),
            ({"payment_mode": None}, "Payment mode is required"),
            ({"payment_mode": "cheque"}, "Invalid payment mode"),
            ({"discount": "-5"}, "cannot be negative"),
            ({"loyalty_points_redeemed": -1}, "cannot be negative"),
            ({"loyalty_points_earned": 2.5}, "whole number"),
            ({"created_by": ""}, "staff member is required"),
            ({"items": [CartItem(product_id=1, quantity=0, unit_price=500)]}, "must be positive"),
            ({"items": [CartItem(product_id="1", quantity=1, unit_price=500)]}, "Invalid product id"),
            ({"customer_id": "7"}, "Invalid customer id"),
            ({"customer_id": True}, "Invalid customer id"),
        ],
    )
    def test_invalid_request_rejected_without_side_effects(self, overrides, message):
        handler, uow = _setup()

        with pytest.raises(ValidationError, match=message):
            handler.handle(_cart(**overrides))

        assert uow.products.get_by_id(1).stock == 5
        assert uow.bills.all() == []
        assert uow.commits == 0

    def test_discount_defaults_to_zero(self):
        handler, _ = _setup()
        bill = handler.handle(_cart(discount=None))
        assert bill.discount.amount == Decimal("0")


class TestCheckoutTotalsVerification:

    def test_consistent_totals_accepted(self):
        handler, _ = _setup(verify_totals=True, points=50)
        bill = handler.handle(_cart(
            customer_id=7, discount=20, loyalty_points_redeemed=30, total_amount=1000,
        ))
        assert bill.total_amount.amount == Decimal("1000")

    def test_understated_total_rejected(self):
        handler, uow = _setup(verify_totals=True)

        with pytest.raises(ValidationError, match="Total amount"):
            handler.handle(_cart(total_amount=900))

        assert uow.products.get_by_id(1).stock == 5

    def test_wrong_subtotal_rejected(self):
        handler, _ = _setup(verify_totals=True)
        with pytest.raises(ValidationError, match="Subtotal"):
            handler.handle(_cart(subtotal=800, total_amount=850))

    def test_wrong_line_total_rejected(self):
        handler, _ = _setup(verify_totals=True)
        with pytest.raises(ValidationError, match="Line total"):
            handler.handle(_cart(items=[
                CartItem(product_id=1, product_name="Cotton Kurti", quantity=2,
                         unit_price=500, line_total=100),
            ]))


class TestCheckoutPersistence:

    def test_duplicate_invoice_number_fails_whole_checkout(self, monkeypatch):
        handler, uow = _setup()
        handler.handle(_cart())
        monkeypatch.setattr(uow.bills, "get_last_invoice_number", lambda: None)

        with pytest.raises(PersistenceError, match="already exists"):
            handler.handle(_cart())

        assert uow.products.get_by_id(1).stock == 3
