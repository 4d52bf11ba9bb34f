from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.pricing_rule_entity import PricingRule
from src.service.booking.domain.enum.pricing_enum import PricingRuleType


class PricingRuleUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, clock: Clock = utc_now) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock)

    @Logger.io
    async def create_rule(
        self,
        *,
        rule_type: PricingRuleType,
        value: int,
        priority: int = 0,
        campaign_id: Optional[str] = None,
        user_id: Optional[str] = None,
        usage_limit: Optional[int] = None,
        description: Optional[str] = None,
    ) -> PricingRule:
        rule = PricingRule.create(
            rule_type=rule_type,
            value=value,
            priority=priority,
            campaign_id=campaign_id,
            user_id=user_id,
            usage_limit=usage_limit,
            description=description,
            now=self.clock(),
        )
        async with self.uow_factory() as uow:
            if campaign_id and not await uow.campaign_repo.get_by_id(campaign_id=campaign_id):
                raise NotFoundError('Campaign not found')
            if user_id and not await uow.user_repo.get_by_id(user_id=user_id):
                raise NotFoundError('User not found')
            rule = await uow.pricing_rule_repo.create(rule=rule)
            await uow.commit()

        Logger.base.info(f'🏷️ [PRICING] Rule {rule.id} ({rule.rule_type}, scope={rule.scope})')
        return rule
