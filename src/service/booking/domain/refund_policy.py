from datetime import datetime, timedelta

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.enum.booking_enum import RefundStatus


@attrs.define(frozen=True)
class RefundDecision:
    amount: int
    status: RefundStatus

    @classmethod
    def none(cls) -> 'RefundDecision':
        return cls(amount=0, status=RefundStatus.NO_REFUND)


@attrs.define(frozen=True)
class RefundPolicy:
    """
    Paid bookings cancelled at least `cutoff_days` before the print deadline
    get their payment back minus the processing fee. Everything else gets nothing.
    """

    cutoff_days: int = 7
    processing_fee_percent: int = 3

    def decide(
        self, *, booking: Booking, campaign: Campaign, now: datetime, waive_fee: bool = False
    ) -> RefundDecision:
        if not booking.is_paid:
            return RefundDecision.none()
        if campaign.print_deadline - now < timedelta(days=self.cutoff_days):
            return RefundDecision.none()

        paid = booking.settled_amount
        fee = 0 if waive_fee else paid * self.processing_fee_percent // 100
        amount = paid - fee
        if amount <= 0:
            return RefundDecision.none()
        return RefundDecision(amount=amount, status=RefundStatus.PENDING)
