from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import RefundStatus


class MarkRefundOutcomeUseCase:
    """Gateway refund callback for a cancelled booking whose refund is pending"""

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
    async def execute(self, *, booking_id: str, refund_status: RefundStatus) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            refunded = await uow.booking_command_repo.update_refund_status(
                booking=booking.record_refund_outcome(refund_status=refund_status)
            )
            await uow.commit()

        Logger.base.info(f'💸 [REFUND] Booking {booking_id} refund {refund_status}')
        return refunded
