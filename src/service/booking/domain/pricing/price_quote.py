from typing import Mapping

import attrs

from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.pricing_rule_entity import PricingRule
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.domain.enum.pricing_enum import PriceSource, PricingRuleType


@attrs.define(frozen=True)
class PriceBreakdown:
    base_price: int
    discount_amount: int
    final_price: int


@attrs.define(frozen=True)
class AppliedRule:
    rule_id: str
    rule_type: PricingRuleType
    value: int
    description: str | None = None

    @classmethod
    def from_rule(cls, rule: PricingRule) -> 'AppliedRule':
        return cls(
            rule_id=rule.id, rule_type=rule.rule_type, value=rule.value, description=rule.description
        )


@attrs.define(frozen=True)
class PriceQuote:
    total_price: int
    breakdown: PriceBreakdown
    price_source: PriceSource
    applied_rules: tuple[AppliedRule, ...] = ()

    @property
    def uses_loyalty_discount(self) -> bool:
        return self.price_source == PriceSource.LOYALTY_DISCOUNT

    @property
    def is_regular_price(self) -> bool:
        return self.price_source == PriceSource.DEFAULT_TIERED


@attrs.define(frozen=True)
class PricingContext:
    """Everything the resolver needs, loaded up front so resolution stays pure"""

    campaign: Campaign
    user: User
    quantity: int
    year: int
    default_first_slot_price: int
    default_additional_slot_price: int
    loyalty_discount_amount: int
    rules: tuple[PricingRule, ...] = ()
    # rule_id -> how many times this user already consumed it
    user_rule_applications: Mapping[str, int] = attrs.field(factory=dict)

    @property
    def base_price(self) -> int:
        return self.campaign.tiered_price(
            quantity=self.quantity,
            default_first_slot_price=self.default_first_slot_price,
            default_additional_slot_price=self.default_additional_slot_price,
        )

    def eligible_rules(self) -> tuple[PricingRule, ...]:
        return tuple(
            rule
            for rule in self.rules
            if rule.has_capacity(user_applications=self.user_rule_applications.get(rule.id, 0))
        )


@attrs.define(frozen=True)
class PricingDefaults:
    """Business constants the resolver needs, injected so tests can vary them"""

    first_slot_price: int = 60000
    additional_slot_price: int = 50000
    loyalty_discount_amount: int = 15000
    max_quantity: int = 4
