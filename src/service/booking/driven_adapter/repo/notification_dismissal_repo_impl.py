from datetime import datetime
from typing import Set, Tuple

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
import uuid_utils

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_notification_dismissal_repo import (
    INotificationDismissalRepo,
)
from src.service.booking.domain.admin_notification import NotificationType
from src.service.booking.driven_adapter.model.notification_dismissal_model import (
    NotificationDismissalModel,
)


dismissal_table = NotificationDismissalModel.__table__


class NotificationDismissalRepoImpl(INotificationDismissalRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def list_dismissed(self, *, user_id: str) -> Set[Tuple[str, NotificationType]]:
        rows = (
            await self.session.execute(
                select(dismissal_table.c.booking_id, dismissal_table.c.notification_type).where(
                    dismissal_table.c.user_id == user_id
                )
            )
        ).all()
        return {(booking_id, NotificationType(kind)) for booking_id, kind in rows}

    @Logger.io
    async def dismiss(
        self,
        *,
        booking_id: str,
        notification_type: NotificationType,
        user_id: str,
        dismissed_at: datetime,
    ) -> None:
        exists = (
            await self.session.execute(
                select(dismissal_table.c.id).where(
                    dismissal_table.c.booking_id == booking_id,
                    dismissal_table.c.notification_type == notification_type,
                    dismissal_table.c.user_id == user_id,
                )
            )
        ).first()
        if exists:
            return
        await self.session.execute(
            insert(dismissal_table).values(
                id=str(uuid_utils.uuid7()),
                booking_id=booking_id,
                notification_type=notification_type,
                user_id=user_id,
                dismissed_at=dismissed_at,
            )
        )

    @Logger.io
    async def delete_for_booking(self, *, booking_id: str) -> None:
        await self.session.execute(
            delete(dismissal_table).where(dismissal_table.c.booking_id == booking_id)
        )
