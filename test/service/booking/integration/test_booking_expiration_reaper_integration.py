"""
Reaper end to end: an abandoned checkout is cancelled and its uploaded file
removed, while a paid booking next to it is left alone.
"""

from datetime import timedelta
from pathlib import Path
from unittest.mock import Mock

import pytest

from src.platform.clock import utc_now
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.booking.app.command.artwork_use_case import ArtworkUseCase
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.mark_booking_paid_use_case import MarkBookingPaidUseCase
from src.service.booking.domain.enum.booking_enum import BookingStatus, RefundStatus
from src.service.booking.driven_adapter.blob.local_blob_store_impl import LocalBlobStore
from src.service.booking.driving_adapter.scheduler.booking_expiration_reaper import (
    BookingExpirationReaper,
)
from test.service.booking.integration.helpers import Seed, book


def _later():
    return utc_now() + timedelta(minutes=20)


@pytest.mark.integration
async def test_reaper_expires_abandoned_checkout(
    tmp_path: Path,
    uow_factory: UnitOfWorkFactory,
    seed: Seed,
    metrics: Mock,
    create_booking: CreateBookingUseCase,
    mark_paid: MarkBookingPaidUseCase,
    cancel_booking: CancelBookingUseCase,
) -> None:
    # Given: an abandoned checkout with uploaded artwork and a paid booking
    blob_store = LocalBlobStore(root=str(tmp_path))
    artwork = tmp_path / 'artwork' / 'sunrise.png'
    artwork.parent.mkdir()
    artwork.write_bytes(b'png')

    abandoned = await book(create_booking, seed, user_id=seed.ada_id)
    await ArtworkUseCase(uow_factory=uow_factory, blob_store=blob_store).submit_artwork(
        booking_id=abandoned.id, user_id=seed.ada_id, file_path='artwork/sunrise.png'
    )
    paid = await book(create_booking, seed, user_id=seed.grace_id, industry_id=seed.other_id)
    await mark_paid.execute(booking_id=paid.id, amount_paid=60000, payment_ref='pi_g')

    reaper = BookingExpirationReaper(
        uow_factory=uow_factory,
        cancel_booking=cancel_booking,
        blob_store=blob_store,
        metrics=metrics,
        clock=_later,
        pending_timeout=timedelta(minutes=15),
    )

    # When: the reaper runs twenty minutes later
    assert await reaper.run_once() == 1
    # Then: only the abandoned checkout is expired and its file removed
    assert not artwork.exists()

    async with uow_factory() as uow:
        expired = await uow.booking_command_repo.get_by_id(booking_id=abandoned.id)
        untouched = await uow.booking_command_repo.get_by_id(booking_id=paid.id)
    assert expired.status == BookingStatus.CANCELLED
    assert expired.refund_status == RefundStatus.NO_REFUND
    assert expired.artwork_file_path is None
    assert untouched.status == BookingStatus.CONFIRMED
    metrics.record_booking_cancelled.assert_called_once_with(reason='expired')

    assert await reaper.run_once() == 0


@pytest.mark.integration
async def test_fresh_pending_booking_is_not_reaped(
    uow_factory: UnitOfWorkFactory,
    seed: Seed,
    metrics: Mock,
    create_booking: CreateBookingUseCase,
    cancel_booking: CancelBookingUseCase,
) -> None:
    booking = await book(create_booking, seed, user_id=seed.ada_id)
    reaper = BookingExpirationReaper(
        uow_factory=uow_factory,
        cancel_booking=cancel_booking,
        blob_store=Mock(),
        metrics=metrics,
    )

    assert await reaper.run_once() == 0

    async with uow_factory() as uow:
        fresh = await uow.booking_command_repo.get_by_id(booking_id=booking.id)
    assert fresh.is_active
