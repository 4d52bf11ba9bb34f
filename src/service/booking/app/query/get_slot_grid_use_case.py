from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.slot_grid import SlotGrid, compute_slot_grid


class GetSlotGridUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, campaign_id: str) -> SlotGrid:
        with self.tracer.start_as_current_span(
            'use_case.get_slot_grid', attributes={'campaign.id': campaign_id}
        ):
            async with self.uow_factory() as uow:
                campaign = await uow.campaign_repo.get_by_id(campaign_id=campaign_id)
                if not campaign:
                    raise NotFoundError('Campaign not found')
                routes = await uow.campaign_repo.list_routes(campaign_id=campaign_id)
                industries = await uow.campaign_repo.list_industries(campaign_id=campaign_id)
                bookings = await uow.booking_query_repo.list_active_by_campaign(
                    campaign_id=campaign_id
                )

            return compute_slot_grid(
                campaign=campaign, routes=routes, industries=industries, active_bookings=bookings
            )
