"""
Booking Expiration Reaper

Cancels bookings whose payment stayed pending past the timeout and frees
their slot. One immediate run at startup, then one tick per interval.

Per booking (a failure is logged and the tick moves on):
1. Re-fetch; skip unless still confirmed with payment pending
2. Cancel with no refund, guarded on payment still pending
3. Skip the rest unless the cancel happened now
4. Re-fetch again; delete files only if still cancelled, unpaid and with no
   file path set (a newer upload must never be removed)
5. Delete the file paths captured before the cancel cleared them

A loyalty discount reserved by the booking is released inside the cancel
transaction.

The reaper handle is owned by the application lifespan. A second start()
while one loop is running is refused; stop() clears the guard so the
reaper can be started again.
"""

from datetime import timedelta
import time
from typing import Optional

import anyio
from anyio.abc import TaskGroup

from src.platform.clock import Clock, utc_now
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.command.booking_file_cleanup import delete_files_best_effort
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.interface.i_blob_store import IBlobStore
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import PaymentStatus, RefundStatus


class BookingExpirationReaper:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        cancel_booking: CancelBookingUseCase,
        blob_store: IBlobStore,
        metrics: BookingMetrics,
        clock: Clock = utc_now,
        pending_timeout: timedelta = timedelta(minutes=15),
        interval_seconds: float = 60.0,
        booking_timeout_seconds: float = 10.0,
    ) -> None:
        self.uow_factory = uow_factory
        self.cancel_booking = cancel_booking
        self.blob_store = blob_store
        self.metrics = metrics
        self.clock = clock
        self.pending_timeout = pending_timeout
        self.interval_seconds = interval_seconds
        self.booking_timeout_seconds = booking_timeout_seconds
        self._cancel_scope: Optional[anyio.CancelScope] = None

    @property
    def is_running(self) -> bool:
        return self._cancel_scope is not None

    async def start(self, *, task_group: TaskGroup) -> bool:
        """
        Returns:
            False when a loop is already running (nothing started)
        """
        if self._cancel_scope is not None:
            Logger.base.warning('⚠️ [REAPER] Already running, refusing a second instance')
            return False

        scope = anyio.CancelScope()
        self._cancel_scope = scope
        task_group.start_soon(self._run_loop, scope)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(
            f'🧹 [REAPER] Started (interval={self.interval_seconds}s, '
            f'timeout={self.pending_timeout})'
        )
        return True

    def stop(self) -> None:
        if self._cancel_scope is None:
            return
        self._cancel_scope.cancel()
        self._cancel_scope = None
        Logger.base.info('🛑 [REAPER] Stopped')

    async def _run_loop(self, scope: anyio.CancelScope) -> None:
        try:
            with scope:
                while True:
                    await self._tick()
                    await anyio.sleep(self.interval_seconds)
        finally:
            if self._cancel_scope is scope:
                self._cancel_scope = None

    async def _tick(self) -> None:
        started = time.perf_counter()
        try:
            expired = await self.run_once()
        except Exception as e:
            self.metrics.record_reaper_failure(stage='tick')
            Logger.base.error(f'❌ [REAPER] Tick failed: {e}')
            return
        self.metrics.record_reaper_tick(expired=expired, duration=time.perf_counter() - started)

    @Logger.io
    async def run_once(self) -> int:
        """
        One reaper pass.

        Returns:
            Number of bookings cancelled by this pass
        """
        cutoff = self.clock() - self.pending_timeout
        async with self.uow_factory() as uow:
            candidates = await uow.booking_query_repo.list_expired_pending(older_than=cutoff)
        if not candidates:
            return 0

        Logger.base.info(f'🧹 [REAPER] {len(candidates)} booking(s) pending since before {cutoff}')
        expired = 0
        for candidate in candidates:
            try:
                with anyio.fail_after(self.booking_timeout_seconds):
                    if await self._expire(booking_id=candidate.id):
                        expired += 1
            except Exception as e:
                self.metrics.record_reaper_failure(stage='booking')
                Logger.base.error(f'❌ [REAPER] Booking {candidate.id} failed: {e}')
        return expired

    async def _fetch(self, *, booking_id: str) -> Optional[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_command_repo.get_by_id(booking_id=booking_id)

    async def _expire(self, *, booking_id: str) -> bool:
        fresh = await self._fetch(booking_id=booking_id)
        if fresh is None or not fresh.is_active or fresh.payment_status != PaymentStatus.PENDING:
            Logger.base.info(f'⏭️ [REAPER] Booking {booking_id} changed since listing, skipped')
            return False

        files = fresh.file_paths
        result = await self.cancel_booking.execute(
            booking_id=booking_id,
            refund_amount=0,
            refund_status=RefundStatus.NO_REFUND,
            reason='expired',
            expected_payment_status=PaymentStatus.PENDING,
        )
        if not result.cancelled_now:
            Logger.base.info(f'⏭️ [REAPER] Booking {booking_id} was not cancelled by this pass')
            return False

        Logger.base.info(f'🧹 [REAPER] Booking {booking_id} expired')
        if not files:
            return True

        after = await self._fetch(booking_id=booking_id)
        if after is None or after.is_active or after.is_paid or after.file_paths:
            Logger.base.warning(
                f'⚠️ [REAPER] Booking {booking_id} changed after cancel, keeping its files'
            )
            return True

        deleted = await delete_files_best_effort(
            blob_store=self.blob_store, paths=files, booking_id=booking_id
        )
        if deleted < len(files):
            self.metrics.record_reaper_failure(stage='file_cleanup')
        return True
