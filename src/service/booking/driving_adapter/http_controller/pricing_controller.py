from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.pricing_rule_use_case import PricingRuleUseCase
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.booking.driving_adapter.http_controller.schema.pricing_schema import (
    PricingRuleCreateRequest,
    PricingRuleResponse,
)


router = APIRouter()


@router.post('/rule', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_pricing_rule(
    request: PricingRuleCreateRequest,
    _admin: User = Depends(require_admin),
    use_case: PricingRuleUseCase = Depends(PricingRuleUseCase.depends),
) -> PricingRuleResponse:
    rule = await use_case.create_rule(**request.model_dump())
    return PricingRuleResponse.model_validate(rule, from_attributes=True)
