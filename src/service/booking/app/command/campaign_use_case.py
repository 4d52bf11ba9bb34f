"""
Campaign Use Case

Admin management of campaigns and the slot dimensions they are built from.

Workflow (forward only, one step at a time):
    planning -> booking_open -> booking_closed -> printed -> mailed -> completed

Offering (routes x industries) and schedule stay editable up to booking_open.
"""

from datetime import datetime
from typing import Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route
from src.service.booking.domain.enum.campaign_status import CampaignStatus


class CampaignUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        unlimited_industry_name: str,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.unlimited_industry_name = unlimited_industry_name
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        unlimited_industry_name: str = Depends(
            Provide[Container.config_service.provided.UNLIMITED_INDUSTRY_NAME]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory, unlimited_industry_name=unlimited_industry_name, clock=clock
        )

    @staticmethod
    async def _ensure_dimensions_exist(
        uow: AbstractUnitOfWork, *, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> None:
        if len(set(route_ids)) != len(route_ids) or len(set(industry_ids)) != len(industry_ids):
            raise InvalidArgumentError('route_ids and industry_ids must not repeat')
        routes = await uow.slot_dimension_repo.list_routes(route_ids=route_ids)
        if len(routes) != len(route_ids):
            raise NotFoundError('Route not found')
        industries = await uow.slot_dimension_repo.list_industries(industry_ids=industry_ids)
        if len(industries) != len(industry_ids):
            raise NotFoundError('Industry not found')

    @staticmethod
    async def _get_campaign(uow: AbstractUnitOfWork, *, campaign_id: str) -> Campaign:
        campaign = await uow.campaign_repo.get_by_id(campaign_id=campaign_id)
        if not campaign:
            raise NotFoundError('Campaign not found')
        return campaign

    @Logger.io
    async def create_campaign(
        self,
        *,
        name: str,
        mail_date: datetime,
        print_deadline: datetime,
        route_ids: Sequence[str],
        industry_ids: Sequence[str],
        base_slot_price: Optional[int] = None,
        additional_slot_price: Optional[int] = None,
    ) -> Campaign:
        campaign = Campaign.create(
            name=name,
            mail_date=mail_date,
            print_deadline=print_deadline,
            route_count=len(route_ids),
            industry_count=len(industry_ids),
            now=self.clock(),
            base_slot_price=base_slot_price,
            additional_slot_price=additional_slot_price,
        )
        async with self.uow_factory() as uow:
            await self._ensure_dimensions_exist(
                uow, route_ids=route_ids, industry_ids=industry_ids
            )
            campaign = await uow.campaign_repo.create(
                campaign=campaign, route_ids=route_ids, industry_ids=industry_ids
            )
            await uow.commit()

        Logger.base.info(
            f'📬 [CAMPAIGN] Created {campaign.name} ({campaign.total_slots} slots, id={campaign.id})'
        )
        return campaign

    @Logger.io
    async def advance_status(self, *, campaign_id: str, status: CampaignStatus) -> Campaign:
        async with self.uow_factory() as uow:
            campaign = await self._get_campaign(uow, campaign_id=campaign_id)
            previous = campaign.status
            campaign = await uow.campaign_repo.update(campaign=campaign.advance_to(status))
            await uow.commit()

        Logger.base.info(f'📬 [CAMPAIGN] {campaign.name}: {previous} -> {campaign.status}')
        return campaign

    @Logger.io
    async def update_offering(
        self, *, campaign_id: str, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> Campaign:
        async with self.uow_factory() as uow:
            campaign = await self._get_campaign(uow, campaign_id=campaign_id)
            campaign.ensure_editable()
            await self._ensure_dimensions_exist(
                uow, route_ids=route_ids, industry_ids=industry_ids
            )
            campaign = await uow.campaign_repo.replace_offering(
                campaign_id=campaign_id, route_ids=route_ids, industry_ids=industry_ids
            )
            await uow.commit()
        return campaign

    @Logger.io
    async def update_schedule(
        self,
        *,
        campaign_id: str,
        name: Optional[str] = None,
        mail_date: Optional[datetime] = None,
        print_deadline: Optional[datetime] = None,
        base_slot_price: Optional[int] = None,
        additional_slot_price: Optional[int] = None,
    ) -> Campaign:
        async with self.uow_factory() as uow:
            campaign = await self._get_campaign(uow, campaign_id=campaign_id)
            campaign = await uow.campaign_repo.update(
                campaign=campaign.reschedule(
                    name=name,
                    mail_date=mail_date,
                    print_deadline=print_deadline,
                    base_slot_price=base_slot_price,
                    additional_slot_price=additional_slot_price,
                )
            )
            await uow.commit()
        return campaign

    @Logger.io
    async def create_route(self, *, zip_code: str, name: str, household_count: int = 0) -> Route:
        route = Route.create(zip_code=zip_code, name=name, household_count=household_count)
        route.created_at = self.clock()
        async with self.uow_factory() as uow:
            route = await uow.slot_dimension_repo.create_route(route=route)
            await uow.commit()
        return route

    @Logger.io
    async def create_industry(self, *, name: str, description: Optional[str] = None) -> Industry:
        industry = Industry.create(
            name=name,
            unlimited_industry_name=self.unlimited_industry_name,
            description=description,
        )
        industry.created_at = self.clock()
        async with self.uow_factory() as uow:
            industry = await uow.slot_dimension_repo.create_industry(industry=industry)
            await uow.commit()
        return industry
