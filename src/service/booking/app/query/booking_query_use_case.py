from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking


class BookingQueryUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_booking(self, *, booking_id: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        return booking

    @Logger.io
    async def list_user_bookings(self, *, user_id: str) -> List[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_query_repo.list_by_user(user_id=user_id)

    @Logger.io
    async def list_campaign_bookings(self, *, campaign_id: str) -> List[Booking]:
        async with self.uow_factory() as uow:
            if not await uow.campaign_repo.get_by_id(campaign_id=campaign_id):
                raise NotFoundError('Campaign not found')
            return await uow.booking_query_repo.list_by_campaign(campaign_id=campaign_id)
