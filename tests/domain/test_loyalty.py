"""Unit tests for the loyalty earn/redeem policy."""

from pos.domain.model.loyalty import LoyaltyPolicy
from pos.domain.model.value_objects import Money


class TestLoyaltyPolicy:

    def test_earns_one_percent_rounded_down(self):
        policy = LoyaltyPolicy()
        assert policy.points_earned(Money.of("1000")) == 10
        assert policy.points_earned(Money.of("199.99")) == 1
        assert policy.points_earned(Money.of("99")) == 0

    def test_redemption_capped_at_twenty_percent(self):
        assert LoyaltyPolicy().max_redeemable(Money.of("1000"), balance=500) == 200

    def test_redemption_capped_at_balance(self):
        assert LoyaltyPolicy().max_redeemable(Money.of("1000"), balance=50) == 50
