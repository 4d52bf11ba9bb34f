"""
Cancel Booking Use Case

The single place a booking is cancelled. In one transaction:
1. Idempotent cancel (status, date, refund outcome, file paths cleared)
2. Campaign counters released when the booking had been paid
3. A loyalty discount reserved by an unpaid booking goes back to the customer

A booking that was already cancelled comes back unchanged with
cancelled_now=False and nothing else is touched.
"""

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.domain.entity.booking_entity import CancellationResult
from src.service.booking.domain.enum.booking_enum import PaymentStatus, RefundStatus


class CancelBookingUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        metrics: BookingMetrics,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.metrics = metrics
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, metrics=metrics, clock=clock)

    @Logger.io
    async def execute(
        self,
        *,
        booking_id: str,
        refund_amount: int = 0,
        refund_status: RefundStatus = RefundStatus.NO_REFUND,
        reason: str = 'admin',
        expected_payment_status: Optional[PaymentStatus] = None,
    ) -> CancellationResult:
        """
        Args:
            expected_payment_status: cancel only while payment is still in this state
        """
        with self.tracer.start_as_current_span(
            'use_case.cancel_booking',
            attributes={'booking.id': booking_id, 'cancel.reason': reason},
        ) as span:
            async with self.uow_factory() as uow:
                result = await uow.booking_command_repo.cancel(
                    booking_id=booking_id,
                    refund_amount=refund_amount,
                    refund_status=refund_status,
                    cancelled_at=self.clock(),
                    expected_payment_status=expected_payment_status,
                )
                if not result.cancelled_now:
                    span.set_attribute('cancel.noop', True)
                    Logger.base.info(f'↩️ [CANCEL] Booking {booking_id} not cancelled now')
                    return result

                booking = result.booking
                if booking.is_paid:
                    await uow.campaign_repo.remove_paid_booking(
                        campaign_id=booking.campaign_id,
                        quantity=booking.quantity,
                        amount=booking.settled_amount,
                    )
                elif booking.loyalty_discount_applied:
                    await uow.user_repo.release_loyalty_discount(user_id=booking.user_id)
                    Logger.base.info(
                        f'🎟️ [CANCEL] Released loyalty discount of user {booking.user_id}'
                    )

                await uow.commit()

            self.metrics.record_booking_cancelled(reason=reason)
            Logger.base.info(
                f'🛑 [CANCEL] Booking {booking_id} cancelled '
                f'(reason={reason}, refund={refund_amount}, refund_status={refund_status})'
            )
            return result
