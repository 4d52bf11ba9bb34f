"""
Mark Booking Paid Use Case

Payment gateway success callback. In one transaction:
1. pending|failed -> paid (already paid is a no-op)
2. campaign booked_slots/revenue incremented, the only place revenue grows
3. regular-price bookings count toward the customer's loyalty reward

A paid booking already holding the same slot makes the unique index fire,
which surfaces as SlotTakenError and rolls everything back.
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError, SlotTakenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.domain.entity.booking_entity import Booking


class MarkBookingPaidUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        metrics: BookingMetrics,
        loyalty_slot_threshold: int,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.metrics = metrics
        self.loyalty_slot_threshold = loyalty_slot_threshold
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
        loyalty_slot_threshold: int = Depends(
            Provide[Container.config_service.provided.LOYALTY_SLOT_THRESHOLD]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            metrics=metrics,
            loyalty_slot_threshold=loyalty_slot_threshold,
            clock=clock,
        )

    async def _award_loyalty(self, uow: AbstractUnitOfWork, *, booking: Booking) -> None:
        user = await uow.user_repo.get_by_id_for_update(user_id=booking.user_id)
        if not user:
            return
        progressed = user.with_paid_slots(
            quantity=booking.quantity,
            year=self.clock().year,
            threshold=self.loyalty_slot_threshold,
        )
        await uow.user_repo.update_loyalty(user=progressed)
        if progressed.loyalty_discounts_available > user.loyalty_discounts_available:
            Logger.base.info(f'🎟️ [PAYMENT] User {user.id} earned a loyalty discount')

    @Logger.io
    async def execute(self, *, booking_id: str, amount_paid: int, payment_ref: str) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.mark_booking_paid', attributes={'booking.id': booking_id}
        ):
            async with self.uow_factory() as uow:
                booking = await uow.booking_command_repo.get_by_id_for_update(
                    booking_id=booking_id
                )
                if not booking:
                    raise NotFoundError('Booking not found')
                if booking.is_active and booking.is_paid:
                    Logger.base.info(f'↩️ [PAYMENT] Booking {booking_id} was already paid')
                    return booking

                paid = booking.mark_paid(
                    amount_paid=amount_paid, payment_ref=payment_ref, now=self.clock()
                )
                try:
                    paid = await uow.booking_command_repo.update_to_paid(booking=paid)
                except SlotTakenError:
                    self.metrics.record_slot_conflict(stage='pay')
                    raise

                await uow.campaign_repo.add_paid_booking(
                    campaign_id=paid.campaign_id,
                    quantity=paid.quantity,
                    amount=paid.settled_amount,
                )
                if paid.counts_toward_loyalty:
                    await self._award_loyalty(uow, booking=paid)

                await uow.commit()

            self.metrics.record_booking_paid()
            Logger.base.info(
                f'💰 [PAYMENT] Booking {booking_id} paid ({amount_paid}, ref={payment_ref})'
            )
            return paid
