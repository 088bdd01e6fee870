"""Application service: Quote Cart use case.

Does the till arithmetic that precedes a checkout: prices each scanned
item from the catalog, adds GST, takes off the discount and any loyalty
redemption, and works out the points the sale earns.  The result is a
CartRequest ready to hand to CheckoutHandler.

Nothing is written here.  Stock is only checked for existence of the
product; the authoritative stock check happens at checkout.
"""

from __future__ import annotations

from decimal import Decimal

from pos.application.dto import WALK_IN_CUSTOMER, CartItem, CartRequest, ItemSpec
from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.loyalty import LoyaltyPolicy
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.unit_of_work import UnitOfWork


class QuoteCartHandler:

    def __init__(self, uow: UnitOfWork, policy: LoyaltyPolicy | None = None) -> None:
        self._uow = uow
        self._policy = policy or LoyaltyPolicy()

    def handle(
        self,
        item_specs: list[ItemSpec],
        payment_mode: str,
        created_by: str,
        customer_id: int | None = None,
        customer_name: str = "",
        customer_phone: str | None = None,
        gst_percent: Decimal | None = None,
        discount: str = "0",
        redeem_points: int = 0,
    ) -> CartRequest:
        """Price a cart.

        With ``gst_percent`` set, GST is that rate on the whole subtotal;
        otherwise each line is taxed at its product's own rate.
        """
        if not item_specs:
            raise ValidationError("Cart must contain at least one item")
        if redeem_points < 0:
            raise ValidationError("Redeemed points cannot be negative")

        with self._uow as uow:
            customer = None
            if customer_id is not None:
                customer = uow.customers.get_by_id(customer_id)
                if customer is None:
                    raise EntityNotFoundError(f"Customer #{customer_id} not found")

            items: list[CartItem] = []
            subtotal = Money.zero()
            line_gst = Money.zero()
            for spec in item_specs:
                product = uow.products.get_by_id(spec.product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product #{spec.product_id} not found")

                quantity = Quantity(spec.quantity)
                line_total = product.selling_price * quantity.value
                items.append(
                    CartItem(
                        product_id=spec.product_id,
                        product_name=product.name,
                        quantity=quantity.value,
                        unit_price=product.selling_price.amount,
                        line_total=line_total.amount,
                    )
                )
                subtotal = subtotal + line_total
                line_gst = line_gst + line_total.percent(product.gst_percent)

        gst = subtotal.percent(gst_percent) if gst_percent is not None else line_gst
        discount_money = Money.of(discount)

        if redeem_points:
            if customer is None:
                raise ValidationError("Loyalty points can only be redeemed by a known customer")
            cap = self._policy.max_redeemable(subtotal, customer.loyalty_points)
            if redeem_points > cap:
                raise ValidationError(f"At most {cap} loyalty points can be redeemed on this bill")

        total = subtotal.amount + gst.amount - discount_money.amount - redeem_points
        if total < 0:
            raise ValidationError("Discount and redemption exceed the bill amount")

        if customer is not None:
            name = customer_name.strip() or customer.name
            phone = customer_phone or customer.phone
            earned = self._policy.points_earned(subtotal)
        else:
            name = customer_name.strip() or WALK_IN_CUSTOMER
            phone = customer_phone
            earned = 0

        return CartRequest(
            customer_id=customer_id,
            customer_name=name,
            customer_phone=phone,
            items=items,
            subtotal=subtotal.amount,
            discount=discount_money.amount,
            gst_amount=gst.amount,
            total_amount=total,
            payment_mode=payment_mode,
            loyalty_points_redeemed=redeem_points,
            loyalty_points_earned=earned,
            created_by=created_by,
        )
