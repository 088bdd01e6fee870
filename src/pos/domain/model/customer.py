"""Customer aggregate with its loyalty-points balance."""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.exceptions import InsufficientPointsError, ValidationError


@dataclass
class Customer:
    """A known buyer.  ``phone`` is the natural de-duplication key.

    Invariants:
    - ``loyalty_points`` is never negative
    """

    id: int | None
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    loyalty_points: int = 0

    def __post_init__(self) -> None:
        if self.loyalty_points < 0:
            raise ValidationError("Loyalty points cannot be negative")

    def reconcile_loyalty(self, redeemed: int, earned: int) -> None:
        """Apply one bill's redemption and earnings to the balance.

        The redemption is checked against the balance *before* the bill's
        own earnings are added.
        """
        if redeemed < 0 or earned < 0:
            raise ValidationError("Loyalty point amounts cannot be negative")
        if redeemed > self.loyalty_points:
            raise InsufficientPointsError(redeemed, self.loyalty_points)
        self.loyalty_points = self.loyalty_points - redeemed + earned
