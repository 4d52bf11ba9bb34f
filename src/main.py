"""
Production FastAPI Application

HTTP API plus the booking expiration reaper running in the app's task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.driving_adapter.scheduler.booking_expiration_reaper import (
    BookingExpirationReaper,
)


def build_reaper() -> BookingExpirationReaper:
    uow_factory = container.unit_of_work.provider
    metrics = container.booking_metrics()
    clock = container.clock()
    return BookingExpirationReaper(
        uow_factory=uow_factory,
        cancel_booking=CancelBookingUseCase(uow_factory=uow_factory, metrics=metrics, clock=clock),
        blob_store=container.blob_store(),
        metrics=metrics,
        clock=clock,
        pending_timeout=timedelta(minutes=settings.BOOKING_PENDING_TIMEOUT_MINUTES),
        interval_seconds=settings.REAPER_INTERVAL_SECONDS,
        booking_timeout_seconds=settings.REAPER_BOOKING_TIMEOUT_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Mailer Booking] Starting up...')

    tracing = TracingConfig(service_name='mailer-booking')
    tracing.setup()
    Logger.base.info('📊 [Mailer Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Mailer Booking] Dependency injection wired')

    database = container.database()
    await database.create_db_and_tables()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info('🗄️  [Mailer Booking] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        reaper = build_reaper()
        if settings.ENABLE_EXPIRATION_REAPER:
            await reaper.start(task_group=tg)
        else:
            Logger.base.info('⏸️ [Mailer Booking] Expiration reaper disabled')

        Logger.base.info('✅ [Mailer Booking] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Mailer Booking] Shutting down...')
        reaper.stop()
        tg.cancel_scope.cancel()

    await database.dispose()
    Logger.base.info('🗄️  [Mailer Booking] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Mailer Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
