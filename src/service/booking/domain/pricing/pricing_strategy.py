"""
Pricing strategies evaluated in order, first match wins.

Every strategy prices against the campaign-effective default (campaign slot
price overrides applied), never against a price produced by an earlier tier.

    1. user_fixed          user-scoped fixed_price rule
    2. loyalty_discount    earned loyalty reward for the current year
    3. user_discount       user-scoped amount/percent rule
    4. campaign_discount   campaign-scoped rule without a user
    5. global_discount     rule without campaign or user
    6. default_tiered      no rule
"""

from abc import ABC, abstractmethod
from typing import Sequence

from src.service.booking.domain.entity.pricing_rule_entity import PricingRule
from src.service.booking.domain.enum.pricing_enum import (
    PriceSource,
    PricingRuleScope,
    PricingRuleType,
)
from src.service.booking.domain.pricing.price_quote import (
    AppliedRule,
    PriceBreakdown,
    PriceQuote,
    PricingContext,
)


def _pick_highest_priority(rules: Sequence[PricingRule]) -> PricingRule | None:
    if not rules:
        return None
    # Ties go to the oldest rule (UUID7 ids sort by creation time)
    return min(rules, key=lambda rule: (-rule.priority, rule.id))


def _rule_in_scope(rule: PricingRule, *, scope: PricingRuleScope, context: PricingContext) -> bool:
    if rule.scope != scope:
        return False
    if scope == PricingRuleScope.USER:
        return rule.user_id == context.user.id and rule.campaign_id in (None, context.campaign.id)
    if scope == PricingRuleScope.CAMPAIGN:
        return rule.campaign_id == context.campaign.id
    return True


def _quote(
    *, base_price: int, final_price: int, source: PriceSource, rule: PricingRule | None = None
) -> PriceQuote:
    final_price = max(0, final_price)
    return PriceQuote(
        total_price=final_price,
        breakdown=PriceBreakdown(
            base_price=base_price,
            discount_amount=max(0, base_price - final_price),
            final_price=final_price,
        ),
        price_source=source,
        applied_rules=(AppliedRule.from_rule(rule),) if rule else (),
    )


class PricingStrategy(ABC):
    source: PriceSource

    @abstractmethod
    def evaluate(self, context: PricingContext) -> PriceQuote | None:
        """Return a quote, or None when this tier does not apply"""


class UserFixedPriceStrategy(PricingStrategy):
    source = PriceSource.USER_FIXED

    def evaluate(self, context: PricingContext) -> PriceQuote | None:
        rule = _pick_highest_priority(
            [
                rule
                for rule in context.eligible_rules()
                if rule.rule_type == PricingRuleType.FIXED_PRICE
                and _rule_in_scope(rule, scope=PricingRuleScope.USER, context=context)
            ]
        )
        if rule is None:
            return None
        return _quote(
            base_price=context.base_price,
            final_price=rule.value * context.quantity,
            source=self.source,
            rule=rule,
        )


class LoyaltyDiscountStrategy(PricingStrategy):
    source = PriceSource.LOYALTY_DISCOUNT

    def evaluate(self, context: PricingContext) -> PriceQuote | None:
        if not context.user.has_loyalty_discount(year=context.year):
            return None
        return _quote(
            base_price=context.base_price,
            final_price=context.base_price - context.loyalty_discount_amount,
            source=self.source,
        )


class RuleDiscountStrategy(PricingStrategy):
    """Highest-priority amount/percent rule within one scope"""

    def __init__(self, *, scope: PricingRuleScope, source: PriceSource) -> None:
        self.scope = scope
        self.source = source

    def evaluate(self, context: PricingContext) -> PriceQuote | None:
        rule = _pick_highest_priority(
            [
                rule
                for rule in context.eligible_rules()
                if rule.is_discount and _rule_in_scope(rule, scope=self.scope, context=context)
            ]
        )
        if rule is None:
            return None
        return _quote(
            base_price=context.base_price,
            final_price=context.base_price - rule.discount_on(context.base_price),
            source=self.source,
            rule=rule,
        )


class DefaultTieredStrategy(PricingStrategy):
    source = PriceSource.DEFAULT_TIERED

    def evaluate(self, context: PricingContext) -> PriceQuote:
        return _quote(
            base_price=context.base_price, final_price=context.base_price, source=self.source
        )


DEFAULT_STRATEGIES: tuple[PricingStrategy, ...] = (
    UserFixedPriceStrategy(),
    LoyaltyDiscountStrategy(),
    RuleDiscountStrategy(scope=PricingRuleScope.USER, source=PriceSource.USER_DISCOUNT),
    RuleDiscountStrategy(scope=PricingRuleScope.CAMPAIGN, source=PriceSource.CAMPAIGN_DISCOUNT),
    RuleDiscountStrategy(scope=PricingRuleScope.GLOBAL, source=PriceSource.GLOBAL_DISCOUNT),
    DefaultTieredStrategy(),
)


def resolve_price(
    context: PricingContext, *, strategies: Sequence[PricingStrategy] = DEFAULT_STRATEGIES
) -> PriceQuote:
    """Pure: identical context in, identical quote out"""
    for strategy in strategies:
        if (quote := strategy.evaluate(context)) is not None:
            return quote
    return DefaultTieredStrategy().evaluate(context)
