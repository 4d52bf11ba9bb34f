"""
Quote Price Use Case

Loads the campaign, the customer, the candidate pricing rules and the
customer's rule usage, then hands everything to the pure resolver.
"""

from datetime import datetime
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.pricing.price_quote import (
    PriceQuote,
    PricingContext,
    PricingDefaults,
)
from src.service.booking.domain.pricing.pricing_strategy import resolve_price


async def load_pricing_context(
    uow: AbstractUnitOfWork,
    *,
    campaign_id: str,
    user_id: str,
    quantity: int,
    now: datetime,
    defaults: PricingDefaults,
) -> PricingContext:
    """
    Raises:
        InvalidArgumentError: quantity outside [1, max_quantity]
        NotFoundError: campaign or user missing
    """
    if not 1 <= quantity <= defaults.max_quantity:
        raise InvalidArgumentError(f'quantity must be between 1 and {defaults.max_quantity}')

    campaign = await uow.campaign_repo.get_by_id(campaign_id=campaign_id)
    if not campaign:
        raise NotFoundError('Campaign not found')
    user = await uow.user_repo.get_by_id(user_id=user_id)
    if not user:
        raise NotFoundError('User not found')

    rules = await uow.pricing_rule_repo.list_candidates(campaign_id=campaign_id, user_id=user_id)
    applications = await uow.pricing_rule_repo.count_user_applications(
        user_id=user_id, rule_ids=[rule.id for rule in rules if rule.user_id is not None]
    )
    return PricingContext(
        campaign=campaign,
        user=user,
        quantity=quantity,
        year=now.year,
        default_first_slot_price=defaults.first_slot_price,
        default_additional_slot_price=defaults.additional_slot_price,
        loyalty_discount_amount=defaults.loyalty_discount_amount,
        rules=tuple(rules),
        user_rule_applications=applications,
    )


class QuotePriceUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        defaults: PricingDefaults,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.defaults = defaults
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        defaults: PricingDefaults = Depends(Provide[Container.pricing_defaults]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, defaults=defaults, clock=clock)

    @Logger.io
    async def execute(self, *, campaign_id: str, user_id: str, quantity: int) -> PriceQuote:
        with self.tracer.start_as_current_span(
            'use_case.quote_price',
            attributes={'campaign.id': campaign_id, 'booking.quantity': quantity},
        ):
            async with self.uow_factory() as uow:
                context = await load_pricing_context(
                    uow,
                    campaign_id=campaign_id,
                    user_id=user_id,
                    quantity=quantity,
                    now=self.clock(),
                    defaults=self.defaults,
                )
            return resolve_price(context)
