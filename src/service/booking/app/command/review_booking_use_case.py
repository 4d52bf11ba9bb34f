from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking


class ReviewBookingUseCase:
    """Admin approval gate, independent of payment"""

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
    async def approve(self, *, booking_id: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            approved = await uow.booking_command_repo.update_review(
                booking=booking.approve(now=self.clock())
            )
            await uow.commit()

        Logger.base.info(f'✅ [REVIEW] Booking {booking_id} approved')
        return approved

    @Logger.io
    async def reject(self, *, booking_id: str, note: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            rejected = await uow.booking_command_repo.update_review(
                booking=booking.reject(note=note, now=self.clock())
            )
            await uow.commit()

        Logger.base.info(f'🚫 [REVIEW] Booking {booking_id} rejected')
        return rejected
