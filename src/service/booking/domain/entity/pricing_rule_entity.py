from datetime import datetime
from typing import Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidArgumentError
from src.service.booking.domain.enum.pricing_enum import (
    PricingRuleScope,
    PricingRuleStatus,
    PricingRuleType,
)


@attrs.define
class PricingRule:
    id: str
    rule_type: PricingRuleType
    value: int
    priority: int = 0
    campaign_id: Optional[str] = None
    user_id: Optional[str] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    status: PricingRuleStatus = PricingRuleStatus.ACTIVE
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        rule_type: PricingRuleType,
        value: int,
        priority: int = 0,
        campaign_id: Optional[str] = None,
        user_id: Optional[str] = None,
        usage_limit: Optional[int] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> 'PricingRule':
        if value < 0:
            raise InvalidArgumentError('Pricing rule value must not be negative')
        if rule_type == PricingRuleType.DISCOUNT_PERCENT and value > 100:
            raise InvalidArgumentError('Percent discount must be between 0 and 100')
        if usage_limit is not None and usage_limit < 1:
            raise InvalidArgumentError('usage_limit must be at least 1')
        return cls(
            id=str(uuid_utils.uuid7()),
            rule_type=rule_type,
            value=value,
            priority=priority,
            campaign_id=campaign_id,
            user_id=user_id,
            usage_limit=usage_limit,
            description=description,
            created_at=now,
        )

    @property
    def scope(self) -> PricingRuleScope:
        if self.user_id is not None:
            return PricingRuleScope.USER
        if self.campaign_id is not None:
            return PricingRuleScope.CAMPAIGN
        return PricingRuleScope.GLOBAL

    @property
    def is_discount(self) -> bool:
        return self.rule_type in (PricingRuleType.DISCOUNT_AMOUNT, PricingRuleType.DISCOUNT_PERCENT)

    def has_capacity(self, *, user_applications: int = 0) -> bool:
        """
        A rule stays usable while neither its global counter nor, for
        user-scoped rules, this user's own applications reached the limit.
        """
        if self.status != PricingRuleStatus.ACTIVE:
            return False
        if self.usage_limit is None:
            return True
        if self.usage_count >= self.usage_limit:
            return False
        if self.scope == PricingRuleScope.USER and user_applications >= self.usage_limit:
            return False
        return True

    def discount_on(self, base_price: int) -> int:
        if self.rule_type == PricingRuleType.DISCOUNT_PERCENT:
            return base_price * self.value // 100
        if self.rule_type == PricingRuleType.DISCOUNT_AMOUNT:
            return self.value
        return 0
