from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.booking.domain.enum.pricing_enum import PricingRuleType


class PriceBreakdownResponse(BaseModel):
    model_config = {'from_attributes': True}

    base_price: int
    discount_amount: int
    final_price: int


class AppliedRuleResponse(BaseModel):
    model_config = {'from_attributes': True}

    rule_id: str
    rule_type: str
    value: int
    description: Optional[str] = None


class PriceQuoteResponse(BaseModel):
    model_config = {
        'from_attributes': True,
        'json_schema_extra': {
            'example': {
                'total_price': 160000,
                'breakdown': {'base_price': 160000, 'discount_amount': 0, 'final_price': 160000},
                'price_source': 'default_tiered',
                'applied_rules': [],
            }
        },
    }

    total_price: int
    breakdown: PriceBreakdownResponse
    price_source: str
    applied_rules: List[AppliedRuleResponse]


class PricingRuleCreateRequest(BaseModel):
    rule_type: PricingRuleType
    value: int = Field(ge=0)
    priority: int = 0
    campaign_id: Optional[str] = None
    user_id: Optional[str] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None


class PricingRuleResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: str
    rule_type: str
    value: int
    priority: int
    campaign_id: Optional[str] = None
    user_id: Optional[str] = None
    usage_limit: Optional[int] = None
    usage_count: int
    status: str
    description: Optional[str] = None
