from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import PaymentStatus


class MarkPaymentFailedUseCase:
    """Gateway failure: the booking stays confirmed and can be paid again"""

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
    async def execute(self, *, booking_id: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            failed = await uow.booking_command_repo.update_payment_status(
                booking=booking.mark_payment_failed(), expected_status=PaymentStatus.PENDING
            )
            await uow.commit()

        Logger.base.warning(f'💳 [PAYMENT] Payment of booking {booking_id} failed')
        return failed
