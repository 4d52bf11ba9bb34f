from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.admin_notification import (
    AdminNotification,
    NotificationType,
    NotificationWindows,
    derive_admin_notifications,
)


class ListAdminNotificationsUseCase:
    """Notifications are derived from booking state on every read"""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        windows: NotificationWindows,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.windows = windows
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        windows: NotificationWindows = Depends(Provide[Container.notification_windows]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, windows=windows, clock=clock)

    @Logger.io
    async def list_notifications(
        self, *, user_id: str, notification_type: Optional[NotificationType] = None
    ) -> List[AdminNotification]:
        now = self.clock()
        async with self.uow_factory() as uow:
            bookings = await uow.booking_query_repo.list_for_notifications(
                created_since=now - self.windows.new_booking,
                cancelled_since=now - self.windows.cancelled_booking,
            )
            dismissed = await uow.notification_dismissal_repo.list_dismissed(user_id=user_id)

        return derive_admin_notifications(
            bookings=bookings,
            dismissed=dismissed,
            now=now,
            windows=self.windows,
            notification_type=notification_type,
        )

    @Logger.io
    async def count(self, *, user_id: str) -> int:
        return len(await self.list_notifications(user_id=user_id))
