"""
Unit tests for the pricing resolver

Tier order: user fixed > loyalty > user discount > campaign discount >
global discount > default tiered. Every tier prices against the
campaign-effective tiered default.
"""

from typing import Any

import pytest

from src.service.booking.domain.enum.pricing_enum import (
    PriceSource,
    PricingRuleStatus,
    PricingRuleType,
)
from src.service.booking.domain.pricing.price_quote import PricingContext
from src.service.booking.domain.pricing.pricing_strategy import resolve_price
from test.service.booking.unit.helpers import (
    CAMPAIGN_ID,
    NOW,
    USER_ID,
    make_campaign,
    make_rule,
    make_user,
)


def _context(**overrides: Any) -> PricingContext:
    values: dict[str, Any] = {
        'campaign': make_campaign(),
        'user': make_user(),
        'quantity': 1,
        'year': NOW.year,
        'default_first_slot_price': 60000,
        'default_additional_slot_price': 50000,
        'loyalty_discount_amount': 15000,
    }
    values.update(overrides)
    return PricingContext(**values)


@pytest.mark.unit
class TestDefaultTieredPrice:
    @pytest.mark.parametrize(
        'quantity,expected',
        [(1, 60000), (2, 110000), (3, 160000), (4, 210000)],
    )
    def test_tiered_default(self, quantity: int, expected: int) -> None:
        quote = resolve_price(_context(quantity=quantity))

        assert quote.total_price == expected
        assert quote.price_source == PriceSource.DEFAULT_TIERED
        assert quote.breakdown.discount_amount == 0
        assert quote.applied_rules == ()

    def test_campaign_slot_prices_override_defaults(self) -> None:
        campaign = make_campaign(base_slot_price=40000, additional_slot_price=30000)

        quote = resolve_price(_context(campaign=campaign, quantity=3))

        assert quote.total_price == 100000


@pytest.mark.unit
class TestTierPrecedence:
    def test_user_fixed_price_wins_over_everything(self) -> None:
        rules = (
            make_rule(
                id='r-fixed',
                rule_type=PricingRuleType.FIXED_PRICE,
                value=45000,
                user_id=USER_ID,
            ),
            make_rule(id='r-campaign', campaign_id=CAMPAIGN_ID, value=20000),
        )
        user = make_user(loyalty_discounts_available=1)

        quote = resolve_price(_context(rules=rules, user=user, quantity=2))

        assert quote.price_source == PriceSource.USER_FIXED
        assert quote.total_price == 90000
        assert quote.breakdown.base_price == 110000
        assert [rule.rule_id for rule in quote.applied_rules] == ['r-fixed']

    def test_loyalty_beats_campaign_discount(self) -> None:
        rules = (make_rule(id='r-campaign', campaign_id=CAMPAIGN_ID, value=20000),)
        user = make_user(loyalty_discounts_available=1)

        quote = resolve_price(_context(rules=rules, user=user))

        assert quote.price_source == PriceSource.LOYALTY_DISCOUNT
        assert quote.total_price == 45000
        assert quote.applied_rules == ()
        assert quote.uses_loyalty_discount

    def test_lapsed_loyalty_discount_is_ignored(self) -> None:
        user = make_user(loyalty_discounts_available=2, loyalty_year_reset=NOW.year - 1)

        quote = resolve_price(_context(user=user))

        assert quote.price_source == PriceSource.DEFAULT_TIERED

    def test_user_discount_beats_campaign_and_global(self) -> None:
        rules = (
            make_rule(id='r-global', value=30000),
            make_rule(id='r-campaign', campaign_id=CAMPAIGN_ID, value=25000),
            make_rule(
                id='r-user',
                user_id=USER_ID,
                rule_type=PricingRuleType.DISCOUNT_PERCENT,
                value=10,
            ),
        )

        quote = resolve_price(_context(rules=rules))

        assert quote.price_source == PriceSource.USER_DISCOUNT
        assert quote.total_price == 54000

    def test_campaign_discount_beats_global(self) -> None:
        rules = (
            make_rule(id='r-global', value=30000),
            make_rule(id='r-campaign', campaign_id=CAMPAIGN_ID, value=5000),
        )

        quote = resolve_price(_context(rules=rules))

        assert quote.price_source == PriceSource.CAMPAIGN_DISCOUNT
        assert quote.total_price == 55000

    def test_rule_of_another_campaign_does_not_apply(self) -> None:
        rules = (make_rule(id='r-other', campaign_id='another-campaign', value=5000),)

        quote = resolve_price(_context(rules=rules))

        assert quote.price_source == PriceSource.DEFAULT_TIERED

    def test_highest_priority_rule_wins_within_a_tier(self) -> None:
        rules = (
            make_rule(id='r-low', value=30000, priority=1),
            make_rule(id='r-high', value=5000, priority=10),
        )

        quote = resolve_price(_context(rules=rules))

        assert quote.applied_rules[0].rule_id == 'r-high'
        assert quote.total_price == 55000


@pytest.mark.unit
class TestRuleEligibility:
    def test_exhausted_rule_is_skipped(self) -> None:
        rules = (make_rule(id='r-global', value=5000, usage_limit=3, usage_count=3),)

        quote = resolve_price(_context(rules=rules))

        assert quote.price_source == PriceSource.DEFAULT_TIERED

    def test_user_rule_limit_counts_the_users_own_applications(self) -> None:
        rules = (make_rule(id='r-user', user_id=USER_ID, value=5000, usage_limit=1),)

        quote = resolve_price(_context(rules=rules, user_rule_applications={'r-user': 1}))

        assert quote.price_source == PriceSource.DEFAULT_TIERED

    def test_inactive_rule_is_skipped(self) -> None:
        rules = (make_rule(id='r-global', value=5000, status=PricingRuleStatus.INACTIVE),)

        quote = resolve_price(_context(rules=rules))

        assert quote.price_source == PriceSource.DEFAULT_TIERED

    def test_discount_never_goes_below_zero(self) -> None:
        rules = (make_rule(id='r-global', value=999999),)

        quote = resolve_price(_context(rules=rules))

        assert quote.total_price == 0
        assert quote.breakdown.discount_amount == 60000


@pytest.mark.unit
def test_resolution_is_pure() -> None:
    context = _context(
        quantity=2,
        rules=(make_rule(id='r-campaign', campaign_id=CAMPAIGN_ID, value=5000),),
    )

    assert resolve_price(context) == resolve_price(context)
