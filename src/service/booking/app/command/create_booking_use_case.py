"""
Create Booking Use Case

One transaction:
1. Load the pricing context (campaign, customer, rules, rule usage)
2. Check the campaign is open and the route/industry belong to it
3. Refuse a slot that already holds an active paid booking ("Other" exempt)
4. Resolve the price, reserving a loyalty discount when the quote uses one
5. Insert the booking and record every applied pricing rule
"""

from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    SlotTakenError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.query.quote_price_use_case import load_pricing_context
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.slot_dimension_entity import Industry
from src.service.booking.domain.pricing.price_quote import (
    PriceQuote,
    PricingContext,
    PricingDefaults,
)
from src.service.booking.domain.pricing.pricing_strategy import resolve_price


class CreateBookingUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        defaults: PricingDefaults,
        metrics: BookingMetrics,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.defaults = defaults
        self.metrics = metrics
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        defaults: PricingDefaults = Depends(Provide[Container.pricing_defaults]),
        metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, defaults=defaults, metrics=metrics, clock=clock)

    async def _load_slot_industry(
        self, uow: AbstractUnitOfWork, *, campaign: Campaign, route_id: str, industry_id: str
    ) -> Industry:
        route = await uow.slot_dimension_repo.get_route(route_id=route_id)
        if not route:
            raise NotFoundError('Route not found')
        industry = await uow.slot_dimension_repo.get_industry(industry_id=industry_id)
        if not industry:
            raise NotFoundError('Industry not found')

        campaign_routes = await uow.campaign_repo.list_routes(campaign_id=campaign.id)
        if route.id not in {r.id for r in campaign_routes}:
            raise InvalidArgumentError(f'Route {route.name} is not part of campaign {campaign.name}')
        campaign_industries = await uow.campaign_repo.list_industries(campaign_id=campaign.id)
        if industry.id not in {i.id for i in campaign_industries}:
            raise InvalidArgumentError(
                f'Industry {industry.name} is not part of campaign {campaign.name}'
            )
        return industry

    async def _price(self, uow: AbstractUnitOfWork, *, context: PricingContext) -> PriceQuote:
        quote = resolve_price(context)
        if not quote.uses_loyalty_discount:
            return quote

        reserved = await uow.user_repo.reserve_loyalty_discount(
            user_id=context.user.id, year=context.year
        )
        if reserved:
            return quote

        # Another booking consumed the last discount since the context was loaded
        Logger.base.info(
            f'🎟️ [CREATE-BOOKING] Loyalty discount gone for user {context.user.id}, re-quoting'
        )
        no_loyalty = attrs.evolve(
            context, user=attrs.evolve(context.user, loyalty_discounts_available=0)
        )
        return resolve_price(no_loyalty)

    @Logger.io
    async def execute(
        self,
        *,
        user_id: str,
        campaign_id: str,
        route_id: str,
        industry_id: str,
        business_name: str,
        contact_email: str,
        quantity: int = 1,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'campaign.id': campaign_id,
                'booking.route_id': route_id,
                'booking.industry_id': industry_id,
                'booking.quantity': quantity,
            },
        ) as span:
            now = self.clock()
            async with self.uow_factory() as uow:
                context = await load_pricing_context(
                    uow,
                    campaign_id=campaign_id,
                    user_id=user_id,
                    quantity=quantity,
                    now=now,
                    defaults=self.defaults,
                )
                context.campaign.ensure_open_for_booking()
                industry = await self._load_slot_industry(
                    uow, campaign=context.campaign, route_id=route_id, industry_id=industry_id
                )

                exclusive = not industry.is_unlimited
                if exclusive and await uow.booking_command_repo.find_active_paid_in_cell(
                    campaign_id=campaign_id, route_id=route_id, industry_id=industry_id
                ):
                    self.metrics.record_slot_conflict(stage='create')
                    raise SlotTakenError(
                        'This slot was already purchased by another customer for this campaign'
                    )

                quote = await self._price(uow, context=context)
                booking = Booking.create(
                    user_id=user_id,
                    campaign_id=campaign_id,
                    route_id=route_id,
                    industry_id=industry_id,
                    business_name=business_name,
                    contact_email=contact_email,
                    quantity=quantity,
                    amount=quote.total_price,
                    now=now,
                    max_quantity=self.defaults.max_quantity,
                    exclusive_slot=exclusive,
                    industry_label=industry.name,
                    base_price_before_discounts=quote.breakdown.base_price,
                    loyalty_discount_applied=quote.uses_loyalty_discount,
                    counts_toward_loyalty=quote.is_regular_price,
                )
                booking = await uow.booking_command_repo.create(booking=booking)

                for applied in quote.applied_rules:
                    await uow.pricing_rule_repo.record_application(
                        rule_id=applied.rule_id,
                        booking_id=booking.id,
                        user_id=user_id,
                        applied_at=now,
                    )

                await uow.commit()

            span.set_attribute('booking.id', booking.id)
            span.set_attribute('booking.price_source', str(quote.price_source))
            self.metrics.record_booking_created(price_source=quote.price_source)
            Logger.base.info(
                f'📝 [CREATE-BOOKING] Booking {booking.id} created '
                f'(campaign={campaign_id}, amount={booking.amount}, source={quote.price_source})'
            )
            return booking
