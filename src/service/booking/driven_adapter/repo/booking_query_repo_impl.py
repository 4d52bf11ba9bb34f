from datetime import datetime
from typing import List

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import (
    ArtworkStatus,
    BookingStatus,
    PaymentStatus,
)
from src.service.booking.driven_adapter.repo.booking_row_mapper import (
    booking_row_to_entity,
    booking_table,
)


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    async def _fetch_all(self, stmt: Select) -> List[Booking]:
        rows = (await self.session.execute(stmt)).mappings().all()
        return [booking_row_to_entity(row) for row in rows]

    @Logger.io
    async def list_expired_pending(self, *, older_than: datetime) -> List[Booking]:
        return await self._fetch_all(
            select(booking_table)
            .where(
                booking_table.c.payment_status == PaymentStatus.PENDING,
                booking_table.c.status != BookingStatus.CANCELLED,
                booking_table.c.pending_since < older_than,
            )
            .order_by(booking_table.c.pending_since)
        )

    @Logger.io
    async def list_active_by_campaign(self, *, campaign_id: str) -> List[Booking]:
        return await self._fetch_all(
            select(booking_table)
            .where(
                booking_table.c.campaign_id == campaign_id,
                booking_table.c.status != BookingStatus.CANCELLED,
            )
            .order_by(booking_table.c.created_at)
        )

    @Logger.io
    async def list_by_campaign(self, *, campaign_id: str) -> List[Booking]:
        return await self._fetch_all(
            select(booking_table)
            .where(booking_table.c.campaign_id == campaign_id)
            .order_by(booking_table.c.created_at.desc())
        )

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        return await self._fetch_all(
            select(booking_table)
            .where(booking_table.c.user_id == user_id)
            .order_by(booking_table.c.created_at.desc())
        )

    @Logger.io
    async def list_for_notifications(
        self, *, created_since: datetime, cancelled_since: datetime
    ) -> List[Booking]:
        return await self._fetch_all(
            select(booking_table)
            .where(
                or_(
                    booking_table.c.created_at > created_since,
                    booking_table.c.artwork_status == ArtworkStatus.UNDER_REVIEW,
                    and_(
                        booking_table.c.status == BookingStatus.CANCELLED,
                        booking_table.c.cancellation_date > cancelled_since,
                    ),
                )
            )
            .order_by(booking_table.c.created_at.desc())
        )
