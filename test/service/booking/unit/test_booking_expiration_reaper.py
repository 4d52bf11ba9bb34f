"""
Unit tests for BookingExpirationReaper

1. Payment that lands between listing and cancel is never undone
2. Files are deleted only when the booking is still cancelled, unpaid and bare
3. One failing booking does not stop the pass
4. Only one loop runs at a time; stop() allows a restart
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import anyio
import pytest

from src.platform.exception.exceptions import UpstreamFailureError
from src.service.booking.domain.entity.booking_entity import CancellationResult
from src.service.booking.domain.enum.booking_enum import PaymentStatus, RefundStatus
from src.service.booking.driving_adapter.scheduler.booking_expiration_reaper import (
    BookingExpirationReaper,
)
from test.service.booking.unit.helpers import (
    BOOKING_ID,
    NOW,
    FakeUnitOfWork,
    cancelled,
    fixed_clock,
    make_booking,
)


def _stale(**overrides):
    values = {'pending_since': NOW - timedelta(minutes=20)}
    values.update(overrides)
    return make_booking(**values)


def _reaper(
    uow: FakeUnitOfWork,
    *,
    cancel_booking: AsyncMock | None = None,
    blob_store: AsyncMock | None = None,
    metrics: Mock | None = None,
) -> BookingExpirationReaper:
    return BookingExpirationReaper(
        uow_factory=lambda: uow,
        cancel_booking=cancel_booking or AsyncMock(),
        blob_store=blob_store or AsyncMock(),
        metrics=metrics or Mock(),
        clock=fixed_clock,
        pending_timeout=timedelta(minutes=15),
        interval_seconds=3600,
    )


def _cancel_returning(booking, *, cancelled_now: bool = True) -> AsyncMock:
    cancel_booking = AsyncMock()
    cancel_booking.execute = AsyncMock(
        return_value=CancellationResult(booking=booking, cancelled_now=cancelled_now)
    )
    return cancel_booking


@pytest.mark.unit
class TestRunOnce:
    async def test_expires_stale_booking_and_deletes_its_files(self) -> None:
        stale = _stale(artwork_file_path='art/v1.pdf', logo_file_path='logo.png')
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[stale])
        uow.booking_command_repo.get_by_id = AsyncMock(side_effect=[stale, cancelled(stale)])
        cancel_booking = _cancel_returning(cancelled(stale))
        blob_store = AsyncMock()

        reaper = _reaper(uow, cancel_booking=cancel_booking, blob_store=blob_store)
        expired = await reaper.run_once()

        assert expired == 1
        cancel_booking.execute.assert_awaited_once_with(
            booking_id=BOOKING_ID,
            refund_amount=0,
            refund_status=RefundStatus.NO_REFUND,
            reason='expired',
            expected_payment_status=PaymentStatus.PENDING,
        )
        deleted = [call.kwargs['path'] for call in blob_store.delete.await_args_list]
        assert deleted == ['art/v1.pdf', 'logo.png']

    async def test_cutoff_is_now_minus_timeout(self) -> None:
        uow = FakeUnitOfWork()

        assert await _reaper(uow).run_once() == 0

        uow.booking_query_repo.list_expired_pending.assert_awaited_once_with(
            older_than=NOW - timedelta(minutes=15)
        )

    async def test_payment_landing_after_listing_is_not_undone(self) -> None:
        stale = _stale()
        paid_meanwhile = _stale(payment_status=PaymentStatus.PAID, amount_paid=60000)
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[stale])
        uow.booking_command_repo.get_by_id = AsyncMock(return_value=paid_meanwhile)
        cancel_booking = _cancel_returning(stale)

        assert await _reaper(uow, cancel_booking=cancel_booking).run_once() == 0

        cancel_booking.execute.assert_not_awaited()

    async def test_guarded_cancel_lost_the_race(self) -> None:
        stale = _stale(artwork_file_path='art/v1.pdf')
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[stale])
        uow.booking_command_repo.get_by_id = AsyncMock(return_value=stale)
        blob_store = AsyncMock()

        expired = await _reaper(
            uow,
            cancel_booking=_cancel_returning(stale, cancelled_now=False),
            blob_store=blob_store,
        ).run_once()

        assert expired == 0
        blob_store.delete.assert_not_awaited()

    async def test_newer_upload_after_cancel_keeps_files(self) -> None:
        stale = _stale(artwork_file_path='art/v1.pdf')
        reuploaded = cancelled(stale, artwork_file_path='art/v2.pdf')
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[stale])
        uow.booking_command_repo.get_by_id = AsyncMock(side_effect=[stale, reuploaded])
        blob_store = AsyncMock()

        expired = await _reaper(
            uow, cancel_booking=_cancel_returning(cancelled(stale)), blob_store=blob_store
        ).run_once()

        assert expired == 1
        blob_store.delete.assert_not_awaited()

    async def test_failing_booking_does_not_stop_the_pass(self) -> None:
        first = _stale(id='b-first')
        second = _stale(id='b-second')
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[first, second])
        uow.booking_command_repo.get_by_id = AsyncMock(side_effect=[first, second])
        cancel_booking = AsyncMock()
        cancel_booking.execute = AsyncMock(
            side_effect=[
                RuntimeError('database went away'),
                CancellationResult(booking=cancelled(second), cancelled_now=True),
            ]
        )
        metrics = Mock()

        expired = await _reaper(uow, cancel_booking=cancel_booking, metrics=metrics).run_once()

        assert expired == 1
        metrics.record_reaper_failure.assert_called_once_with(stage='booking')

    async def test_file_cleanup_failure_is_recorded(self) -> None:
        stale = _stale(artwork_file_path='art/v1.pdf')
        uow = FakeUnitOfWork()
        uow.booking_query_repo.list_expired_pending = AsyncMock(return_value=[stale])
        uow.booking_command_repo.get_by_id = AsyncMock(side_effect=[stale, cancelled(stale)])
        blob_store = AsyncMock()
        blob_store.delete = AsyncMock(side_effect=UpstreamFailureError('store offline'))
        metrics = Mock()

        expired = await _reaper(
            uow,
            cancel_booking=_cancel_returning(cancelled(stale)),
            blob_store=blob_store,
            metrics=metrics,
        ).run_once()

        assert expired == 1
        metrics.record_reaper_failure.assert_called_once_with(stage='file_cleanup')


@pytest.mark.unit
class TestLifecycle:
    async def test_second_start_is_refused_until_stopped(self) -> None:
        reaper = _reaper(FakeUnitOfWork())
        reaper.run_once = AsyncMock(return_value=0)

        async with anyio.create_task_group() as tg:
            assert await reaper.start(task_group=tg)
            assert not await reaper.start(task_group=tg)
            assert reaper.is_running

            reaper.stop()
            assert not reaper.is_running

            assert await reaper.start(task_group=tg)
            reaper.stop()

    async def test_stop_without_start_is_harmless(self) -> None:
        reaper = _reaper(FakeUnitOfWork())

        reaper.stop()

        assert not reaper.is_running

    async def test_tick_failure_is_recorded(self) -> None:
        metrics = Mock()
        reaper = _reaper(FakeUnitOfWork(), metrics=metrics)
        reaper.run_once = AsyncMock(side_effect=RuntimeError('boom'))

        await reaper._tick()

        metrics.record_reaper_failure.assert_called_once_with(stage='tick')
        metrics.record_reaper_tick.assert_not_called()
