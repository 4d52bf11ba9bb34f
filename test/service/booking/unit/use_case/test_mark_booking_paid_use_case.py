from unittest.mock import AsyncMock, Mock

import pytest

from src.platform.exception.exceptions import InvalidStateError, NotFoundError, SlotTakenError
from src.service.booking.app.command.mark_booking_paid_use_case import MarkBookingPaidUseCase
from src.service.booking.domain.enum.booking_enum import PaymentStatus
from test.service.booking.unit.helpers import (
    BOOKING_ID,
    CAMPAIGN_ID,
    NOW,
    FakeUnitOfWork,
    cancelled,
    fixed_clock,
    make_booking,
    make_user,
)


def _use_case(uow: FakeUnitOfWork, metrics: Mock) -> MarkBookingPaidUseCase:
    return MarkBookingPaidUseCase(
        uow_factory=lambda: uow, metrics=metrics, loyalty_slot_threshold=3, clock=fixed_clock
    )


@pytest.mark.unit
class TestMarkBookingPaidUseCase:
    async def test_payment_updates_counters_and_loyalty(self) -> None:
        booking = make_booking(quantity=2, amount=110000, counts_toward_loyalty=True)
        user = make_user(loyalty_slots_earned=2)
        uow = FakeUnitOfWork(booking=booking, user=user)
        metrics = Mock()

        paid = await _use_case(uow, metrics).execute(
            booking_id=BOOKING_ID, amount_paid=110000, payment_ref='pi_1'
        )

        assert paid.payment_status == PaymentStatus.PAID
        assert paid.paid_at == NOW
        uow.campaign_repo.add_paid_booking.assert_awaited_once_with(
            campaign_id=CAMPAIGN_ID, quantity=2, amount=110000
        )
        progressed = uow.user_repo.update_loyalty.call_args.kwargs['user']
        assert progressed.loyalty_slots_earned == 4
        assert progressed.loyalty_discounts_available == 1
        assert uow.committed == 1
        metrics.record_booking_paid.assert_called_once()

    async def test_discounted_booking_does_not_earn_loyalty(self) -> None:
        uow = FakeUnitOfWork(booking=make_booking(counts_toward_loyalty=False), user=make_user())

        await _use_case(uow, Mock()).execute(
            booking_id=BOOKING_ID, amount_paid=45000, payment_ref='pi_1'
        )

        uow.user_repo.update_loyalty.assert_not_awaited()
        uow.campaign_repo.add_paid_booking.assert_awaited_once_with(
            campaign_id=CAMPAIGN_ID, quantity=1, amount=45000
        )

    async def test_duplicate_callback_is_idempotent(self) -> None:
        paid = make_booking(payment_status=PaymentStatus.PAID, amount_paid=60000)
        uow = FakeUnitOfWork(booking=paid)

        result = await _use_case(uow, Mock()).execute(
            booking_id=BOOKING_ID, amount_paid=60000, payment_ref='pi_1'
        )

        assert result is paid
        uow.booking_command_repo.update_to_paid.assert_not_awaited()
        uow.campaign_repo.add_paid_booking.assert_not_awaited()
        assert uow.committed == 0

    async def test_slot_taken_on_payment(self) -> None:
        uow = FakeUnitOfWork(booking=make_booking())
        uow.booking_command_repo.update_to_paid = AsyncMock(side_effect=SlotTakenError('taken'))
        metrics = Mock()

        with pytest.raises(SlotTakenError):
            await _use_case(uow, metrics).execute(
                booking_id=BOOKING_ID, amount_paid=60000, payment_ref='pi_1'
            )

        metrics.record_slot_conflict.assert_called_once_with(stage='pay')
        uow.campaign_repo.add_paid_booking.assert_not_awaited()
        assert uow.committed == 0

    async def test_cancelled_booking_cannot_be_paid(self) -> None:
        uow = FakeUnitOfWork(booking=cancelled(make_booking()))

        with pytest.raises(InvalidStateError):
            await _use_case(uow, Mock()).execute(
                booking_id=BOOKING_ID, amount_paid=60000, payment_ref='pi_1'
            )

    async def test_unknown_booking(self) -> None:
        with pytest.raises(NotFoundError):
            await _use_case(FakeUnitOfWork(), Mock()).execute(
                booking_id=BOOKING_ID, amount_paid=60000, payment_ref='pi_1'
            )
