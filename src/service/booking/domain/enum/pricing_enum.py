from enum import StrEnum


class PricingRuleType(StrEnum):
    FIXED_PRICE = 'fixed_price'
    DISCOUNT_AMOUNT = 'discount_amount'
    DISCOUNT_PERCENT = 'discount_percent'


class PricingRuleStatus(StrEnum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class PricingRuleScope(StrEnum):
    GLOBAL = 'global'
    CAMPAIGN = 'campaign'
    USER = 'user'


class PriceSource(StrEnum):
    USER_FIXED = 'user_fixed'
    LOYALTY_DISCOUNT = 'loyalty_discount'
    USER_DISCOUNT = 'user_discount'
    CAMPAIGN_DISCOUNT = 'campaign_discount'
    GLOBAL_DISCOUNT = 'global_discount'
    DEFAULT_TIERED = 'default_tiered'
