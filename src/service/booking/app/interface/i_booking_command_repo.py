from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.booking.domain.entity.booking_entity import Booking, CancellationResult
from src.service.booking.domain.enum.booking_enum import PaymentStatus, RefundStatus


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, booking_id: str) -> Optional[Booking]:
        """Row-locking read where the backend supports it"""
        pass

    @abstractmethod
    async def find_active_paid_in_cell(
        self, *, campaign_id: str, route_id: str, industry_id: str
    ) -> Optional[Booking]:
        """
        Active (not cancelled) paid booking occupying a slot

        Returns:
            The occupying booking, or None when the slot is free
        """
        pass

    @abstractmethod
    async def update_to_paid(self, *, booking: Booking) -> Booking:
        """
        Persist the paid transition, guarded on the row still being confirmed
        and not yet paid.

        Raises:
            SlotTakenError: another paid booking already holds the slot
            InvalidStateError: the row changed underneath (cancelled or paid)
        """
        pass

    @abstractmethod
    async def update_payment_status(
        self, *, booking: Booking, expected_status: PaymentStatus
    ) -> Booking:
        """
        Persist payment_status/pending_since if the stored status still equals expected_status

        Raises:
            InvalidStateError: the row changed underneath
        """
        pass

    @abstractmethod
    async def cancel(
        self,
        *,
        booking_id: str,
        refund_amount: int,
        refund_status: RefundStatus,
        cancelled_at: datetime,
        expected_payment_status: Optional[PaymentStatus] = None,
    ) -> CancellationResult:
        """
        Idempotent cancellation

        Sets status=cancelled, stamps the cancellation date, stores the refund
        outcome and nulls every file path in one statement. A booking that was
        already cancelled, or whose payment status no longer equals
        expected_payment_status when given, is returned unchanged with
        cancelled_now=False.

        Raises:
            NotFoundError: no such booking
        """
        pass

    @abstractmethod
    async def update_review(self, *, booking: Booking) -> Booking:
        """Persist approval and artwork axes, design asset paths and price override"""
        pass

    @abstractmethod
    async def update_refund_status(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def delete(self, *, booking_id: str) -> Optional[Booking]:
        """
        Returns:
            The deleted booking as it was, or None if it did not exist
        """
        pass
