from unittest.mock import AsyncMock, Mock

import pytest

from src.platform.exception.exceptions import InvalidStateError, SlotTakenError
from src.service.booking.app.command.begin_checkout_use_case import BeginCheckoutUseCase
from src.service.booking.domain.enum.booking_enum import PaymentStatus
from test.service.booking.unit.helpers import (
    BOOKING_ID,
    NOW,
    FakeUnitOfWork,
    cancelled,
    fixed_clock,
    make_booking,
)


def _use_case(uow: FakeUnitOfWork, metrics: Mock | None = None) -> BeginCheckoutUseCase:
    return BeginCheckoutUseCase(
        uow_factory=lambda: uow, metrics=metrics or Mock(), clock=fixed_clock
    )


@pytest.mark.unit
class TestBeginCheckoutUseCase:
    async def test_price_override_is_charged(self) -> None:
        uow = FakeUnitOfWork(booking=make_booking(price_override=45000))

        checkout = await _use_case(uow).execute(booking_id=BOOKING_ID)

        assert checkout.amount_due == 45000
        assert uow.committed == 0

    async def test_failed_payment_reopens_with_fresh_window(self) -> None:
        uow = FakeUnitOfWork(booking=make_booking(payment_status=PaymentStatus.FAILED))

        checkout = await _use_case(uow).execute(booking_id=BOOKING_ID)

        assert checkout.booking.payment_status == PaymentStatus.PENDING
        assert checkout.booking.pending_since == NOW
        uow.booking_command_repo.update_payment_status.assert_awaited_once()
        assert uow.committed == 1

    async def test_slot_bought_by_someone_else(self) -> None:
        uow = FakeUnitOfWork(booking=make_booking())
        uow.booking_command_repo.find_active_paid_in_cell = AsyncMock(
            return_value=make_booking(id='b-holder', payment_status=PaymentStatus.PAID)
        )
        metrics = Mock()

        with pytest.raises(SlotTakenError):
            await _use_case(uow, metrics).execute(booking_id=BOOKING_ID)

        metrics.record_slot_conflict.assert_called_once_with(stage='checkout')

    async def test_cancelled_booking_cannot_check_out(self) -> None:
        uow = FakeUnitOfWork(booking=cancelled(make_booking()))

        with pytest.raises(InvalidStateError):
            await _use_case(uow).execute(booking_id=BOOKING_ID)
