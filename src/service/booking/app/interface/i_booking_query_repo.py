from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def list_expired_pending(self, *, older_than: datetime) -> List[Booking]:
        """
        Bookings still waiting for payment since before `older_than`

        Only payment_status=pending and status!=cancelled rows qualify,
        failed payments are left alone for the customer to retry.
        """
        pass

    @abstractmethod
    async def list_active_by_campaign(self, *, campaign_id: str) -> List[Booking]:
        pass

    @abstractmethod
    async def list_by_campaign(self, *, campaign_id: str) -> List[Booking]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        pass

    @abstractmethod
    async def list_for_notifications(
        self, *, created_since: datetime, cancelled_since: datetime
    ) -> List[Booking]:
        """Bookings created or cancelled inside the windows, plus artwork waiting for review"""
        pass
