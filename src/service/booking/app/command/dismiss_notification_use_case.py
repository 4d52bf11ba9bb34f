from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.admin_notification import NotificationType


class DismissNotificationUseCase:
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
    async def execute(
        self, *, booking_id: str, notification_type: NotificationType, user_id: str
    ) -> None:
        async with self.uow_factory() as uow:
            if not await uow.booking_command_repo.get_by_id(booking_id=booking_id):
                raise NotFoundError('Booking not found')
            await uow.notification_dismissal_repo.dismiss(
                booking_id=booking_id,
                notification_type=notification_type,
                user_id=user_id,
                dismissed_at=self.clock(),
            )
            await uow.commit()
