"""Application service: Checkout use case.

Turns a submitted cart into a persisted Bill:

1. Validate the request (nothing is opened or locked before this passes).
2. Inside one exclusive unit of work:
   a. allocate the next invoice number,
   b. deduct stock for every line, in order,
   c. reconcile the customer's loyalty points (if the customer exists),
   d. insert the bill and commit.

Any failure in step 2 rolls back every stock and loyalty change, so a
checkout either fully succeeds or leaves no trace.  Checkout is not
idempotent: submitting the same cart twice sells it twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from pos.application.dto import Amount, CartItem, CartRequest
from pos.domain.exceptions import DomainException, ValidationError
from pos.domain.model.bill import Bill, LineItem, PaymentMode
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.unit_of_work import UnitOfWork
from pos.domain.service.invoice_numbering_service import InvoiceNumberingService
from pos.domain.service.stock_reservation_service import StockReservationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CheckedCart:
    customer_id: int | None
    customer_name: str
    customer_phone: str | None
    items: list[LineItem]
    subtotal: Money
    discount: Money
    gst_amount: Money
    total_amount: Money
    payment_mode: PaymentMode
    points_redeemed: int
    points_earned: int
    created_by: str


class CheckoutHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_tag: str,
        verify_totals: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow = uow
        self._invoice_tag = invoice_tag
        self._verify_totals = verify_totals
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, cart: CartRequest) -> Bill:
        try:
            checked = self._validate(cart)
            if self._verify_totals:
                self._check_totals(checked)
            bill = self._commit(checked)
        except DomainException as exc:
            logger.warning("Checkout rejected: %s", exc)
            raise

        logger.info(
            "Bill %s created: %d item(s), total %s, %s",
            bill.invoice_number,
            bill.item_count,
            bill.total_amount,
            bill.payment_mode.value,
        )
        return bill

    # --- Transaction ----------------------------------------------------------

    def _commit(self, cart: _CheckedCart) -> Bill:
        with self._uow as uow:
            invoice_number = InvoiceNumberingService(
                uow.bills, self._invoice_tag
            ).next_number()

            items = StockReservationService(uow.products).deduct_for_items(cart.items)

            if cart.customer_id is not None:
                self._reconcile_loyalty(uow, cart)

            bill = Bill(
                id=None,
                invoice_number=str(invoice_number),
                customer_id=cart.customer_id,
                customer_name=cart.customer_name,
                customer_phone=cart.customer_phone,
                items=tuple(items),
                subtotal=cart.subtotal,
                discount=cart.discount,
                gst_amount=cart.gst_amount,
                loyalty_points_redeemed=cart.points_redeemed,
                loyalty_points_earned=cart.points_earned,
                total_amount=cart.total_amount,
                payment_mode=cart.payment_mode,
                created_by=cart.created_by,
                created_at=self._clock(),
            )
            saved = uow.bills.insert(bill)
            uow.commit()

        return saved

    @staticmethod
    def _reconcile_loyalty(uow: UnitOfWork, cart: _CheckedCart) -> None:
        customer = uow.customers.get_by_id(cart.customer_id)  # type: ignore[arg-type]
        if customer is None:
            # Unknown customer: the bill still goes through, points are not tracked.
            logger.info(
                "Customer #%s not found; loyalty points not adjusted", cart.customer_id
            )
            return

        balance = customer.loyalty_points
        customer.reconcile_loyalty(cart.points_redeemed, cart.points_earned)
        delta = customer.loyalty_points - balance
        if delta:
            uow.customers.adjust_loyalty(customer.id, delta)  # type: ignore[arg-type]

    # --- Validation -----------------------------------------------------------

    def _validate(self, cart: CartRequest) -> _CheckedCart:
        if not cart.items:
            raise ValidationError("Bill must contain at least one item")
        if not cart.customer_name or not cart.customer_name.strip():
            raise ValidationError("Customer name is required")
        if not cart.payment_mode:
            raise ValidationError("Payment mode is required")
        if not cart.created_by or not str(cart.created_by).strip():
            raise ValidationError("Creating staff member is required")
        if cart.customer_id is not None and (
            not isinstance(cart.customer_id, int) or isinstance(cart.customer_id, bool)
        ):
            raise ValidationError(f"Invalid customer id: {cart.customer_id!r}")

        return _CheckedCart(
            customer_id=cart.customer_id,
            customer_name=cart.customer_name.strip(),
            customer_phone=(cart.customer_phone or "").strip() or None,
            items=[self._to_line_item(item) for item in cart.items],
            subtotal=_required_money("Subtotal", cart.subtotal),
            discount=_money("Discount", cart.discount if cart.discount is not None else 0),
            gst_amount=_required_money("GST amount", cart.gst_amount),
            total_amount=_required_money("Total amount", cart.total_amount),
            payment_mode=PaymentMode.parse(cart.payment_mode),
            points_redeemed=_points("Loyalty points redeemed", cart.loyalty_points_redeemed),
            points_earned=_points("Loyalty points earned", cart.loyalty_points_earned),
            created_by=str(cart.created_by).strip(),
        )

    @staticmethod
    def _to_line_item(item: CartItem) -> LineItem:
        if not isinstance(item.product_id, int) or isinstance(item.product_id, bool):
            raise ValidationError(f"Invalid product id: {item.product_id!r}")

        quantity = Quantity(item.quantity)
        unit_price = _money(f"Unit price of {item.product_name or item.product_id}", item.unit_price)
        if item.line_total is None:
            line_total = unit_price * quantity.value
        else:
            line_total = _money(f"Line total of {item.product_name or item.product_id}", item.line_total)

        return LineItem(
            product_id=item.product_id,
            product_name=(item.product_name or "").strip(),
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total,
        )

    @staticmethod
    def _check_totals(cart: _CheckedCart) -> None:
        """Cross-check the caller's figures against the line items."""
        for line in cart.items:
            expected = line.unit_price * line.quantity.value
            if not line.line_total.close_to(expected):
                raise ValidationError(
                    f"Line total for {line.product_name or line.product_id} is "
                    f"{line.line_total}, expected {expected}"
                )

        subtotal = Money.zero()
        for line in cart.items:
            subtotal = subtotal + line.line_total
        if not cart.subtotal.close_to(subtotal):
            raise ValidationError(f"Subtotal is {cart.subtotal}, expected {subtotal}")

        expected_total = (
            cart.subtotal.amount
            + cart.gst_amount.amount
            - cart.discount.amount
            - cart.points_redeemed
        )
        if abs(cart.total_amount.amount - expected_total) > Decimal("0.01"):
            raise ValidationError(
                f"Total amount is {cart.total_amount}, expected ₹{expected_total:.2f}"
            )


def _required_money(label: str, value: Amount | None) -> Money:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required")
    return _money(label, value)


def _money(label: str, value: Amount) -> Money:
    try:
        return Money.of(value)
    except ValidationError as exc:
        raise ValidationError(f"{label}: {exc}") from exc


def _points(label: str, value: int | None) -> int:
    if value is None:
        return 0
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative")
    return value
