from abc import ABC, abstractmethod
from datetime import datetime
from typing import Set, Tuple

from src.service.booking.domain.admin_notification import NotificationType


class INotificationDismissalRepo(ABC):
    @abstractmethod
    async def list_dismissed(self, *, user_id: str) -> Set[Tuple[str, NotificationType]]:
        pass

    @abstractmethod
    async def dismiss(
        self,
        *,
        booking_id: str,
        notification_type: NotificationType,
        user_id: str,
        dismissed_at: datetime,
    ) -> None:
        """Idempotent"""
        pass

    @abstractmethod
    async def delete_for_booking(self, *, booking_id: str) -> None:
        pass
