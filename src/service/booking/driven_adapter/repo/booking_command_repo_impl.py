"""
Booking Command Repository Implementation

Every state change is a single guarded UPDATE ... RETURNING, so a concurrent
writer (payment callback, reaper, admin) can never be silently overwritten:
if the guard no longer matches, no row comes back and the caller decides.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvalidStateError, NotFoundError, SlotTakenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking, CancellationResult
from src.service.booking.domain.enum.booking_enum import (
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.driven_adapter.repo.booking_row_mapper import (
    booking_entity_to_values,
    booking_row_to_entity,
    booking_table,
)


_PAYABLE_STATUSES = (PaymentStatus.PENDING, PaymentStatus.FAILED)


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    async def _fetch_one(self, stmt) -> Optional[Booking]:
        row = (await self.session.execute(stmt)).mappings().first()
        return booking_row_to_entity(row) if row else None

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        await self.session.execute(insert(booking_table).values(**booking_entity_to_values(booking)))
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        return await self._fetch_one(select(booking_table).where(booking_table.c.id == booking_id))

    @Logger.io
    async def get_by_id_for_update(self, *, booking_id: str) -> Optional[Booking]:
        return await self._fetch_one(
            select(booking_table).where(booking_table.c.id == booking_id).with_for_update()
        )

    @Logger.io
    async def find_active_paid_in_cell(
        self, *, campaign_id: str, route_id: str, industry_id: str
    ) -> Optional[Booking]:
        return await self._fetch_one(
            select(booking_table)
            .where(
                booking_table.c.campaign_id == campaign_id,
                booking_table.c.route_id == route_id,
                booking_table.c.industry_id == industry_id,
                booking_table.c.status == BookingStatus.CONFIRMED,
                booking_table.c.payment_status == PaymentStatus.PAID,
            )
            .limit(1)
        )

    @Logger.io
    async def update_to_paid(self, *, booking: Booking) -> Booking:
        stmt = (
            update(booking_table)
            .where(
                booking_table.c.id == booking.id,
                booking_table.c.status == BookingStatus.CONFIRMED,
                booking_table.c.payment_status.in_(_PAYABLE_STATUSES),
            )
            .values(
                payment_status=PaymentStatus.PAID,
                amount_paid=booking.amount_paid,
                payment_ref=booking.payment_ref,
                paid_at=booking.paid_at,
                pending_since=None,
            )
            .returning(*booking_table.c)
        )
        try:
            updated = await self._fetch_one(stmt)
        except IntegrityError as e:
            raise SlotTakenError(
                'This slot was already purchased by another customer for this campaign'
            ) from e

        if updated is None:
            raise InvalidStateError(f'Booking {booking.id} is no longer awaiting payment')
        return updated

    @Logger.io
    async def update_payment_status(
        self, *, booking: Booking, expected_status: PaymentStatus
    ) -> Booking:
        updated = await self._fetch_one(
            update(booking_table)
            .where(
                booking_table.c.id == booking.id,
                booking_table.c.status == BookingStatus.CONFIRMED,
                booking_table.c.payment_status == expected_status,
            )
            .values(payment_status=booking.payment_status, pending_since=booking.pending_since)
            .returning(*booking_table.c)
        )
        if updated is None:
            raise InvalidStateError(f'Payment of booking {booking.id} changed concurrently')
        return updated

    @Logger.io
    async def cancel(
        self,
        *,
        booking_id: str,
        refund_amount: int,
        refund_status: RefundStatus,
        cancelled_at: datetime,
        expected_payment_status: Optional[PaymentStatus] = None,
    ) -> CancellationResult:
        conditions = [
            booking_table.c.id == booking_id,
            booking_table.c.status != BookingStatus.CANCELLED,
        ]
        if expected_payment_status is not None:
            conditions.append(booking_table.c.payment_status == expected_payment_status)

        cancelled = await self._fetch_one(
            update(booking_table)
            .where(*conditions)
            .values(
                status=BookingStatus.CANCELLED,
                cancellation_date=cancelled_at,
                refund_amount=refund_amount,
                refund_status=refund_status,
                artwork_file_path=None,
                logo_file_path=None,
                optional_image_path=None,
            )
            .returning(*booking_table.c)
        )
        if cancelled is not None:
            return CancellationResult(booking=cancelled, cancelled_now=True)

        existing = await self.get_by_id(booking_id=booking_id)
        if existing is None:
            raise NotFoundError(f'Booking {booking_id} not found')
        return CancellationResult(booking=existing, cancelled_now=False)

    @Logger.io
    async def update_review(self, *, booking: Booking) -> Booking:
        updated = await self._fetch_one(
            update(booking_table)
            .where(
                booking_table.c.id == booking.id,
                booking_table.c.status == BookingStatus.CONFIRMED,
            )
            .values(
                approval_status=booking.approval_status,
                approved_at=booking.approved_at,
                rejected_at=booking.rejected_at,
                rejection_note=booking.rejection_note,
                artwork_status=booking.artwork_status,
                artwork_file_path=booking.artwork_file_path,
                artwork_uploaded_at=booking.artwork_uploaded_at,
                artwork_reviewed_at=booking.artwork_reviewed_at,
                artwork_rejection_reason=booking.artwork_rejection_reason,
                logo_file_path=booking.logo_file_path,
                optional_image_path=booking.optional_image_path,
                price_override=booking.price_override,
                price_override_note=booking.price_override_note,
                counts_toward_loyalty=booking.counts_toward_loyalty,
            )
            .returning(*booking_table.c)
        )
        if updated is None:
            raise InvalidStateError(f'Booking {booking.id} was cancelled')
        return updated

    @Logger.io
    async def update_refund_status(self, *, booking: Booking) -> Booking:
        updated = await self._fetch_one(
            update(booking_table)
            .where(
                booking_table.c.id == booking.id,
                booking_table.c.refund_status == RefundStatus.PENDING,
            )
            .values(refund_status=booking.refund_status)
            .returning(*booking_table.c)
        )
        if updated is None:
            raise InvalidStateError(f'Refund of booking {booking.id} is no longer pending')
        return updated

    @Logger.io
    async def delete(self, *, booking_id: str) -> Optional[Booking]:
        return await self._fetch_one(
            delete(booking_table)
            .where(booking_table.c.id == booking_id)
            .returning(*booking_table.c)
        )
