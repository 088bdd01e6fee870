"""Loyalty-points rules applied by the calling layer when quoting a cart.

The checkout itself only checks that a redemption fits the balance; the
earn rate and the redemption cap are decided before the cart is
submitted.  One point is worth one rupee of discount.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from pos.domain.model.value_objects import Money


@dataclass(frozen=True)
class LoyaltyPolicy:
    earn_percent: Decimal = Decimal("1")
    max_redeem_percent: Decimal = Decimal("20")

    def points_earned(self, subtotal: Money) -> int:
        return _floor(subtotal.amount * self.earn_percent / Decimal("100"))

    def max_redeemable(self, subtotal: Money, balance: int) -> int:
        cap = _floor(subtotal.amount * self.max_redeem_percent / Decimal("100"))
        return max(0, min(balance, cap))


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))
