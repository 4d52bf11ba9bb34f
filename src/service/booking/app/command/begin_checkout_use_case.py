from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import InvalidStateError, NotFoundError, SlotTakenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import PaymentStatus


@attrs.define(frozen=True)
class Checkout:
    booking: Booking
    amount_due: int


class BeginCheckoutUseCase:
    """
    Hand a booking to the payment gateway.

    The admin price override, when set, replaces the quoted amount. A failed
    payment is reopened with a fresh pending window so the reaper gives the
    customer the full timeout again.
    """

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
    async def execute(self, *, booking_id: str) -> Checkout:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            booking.ensure_active()
            if booking.is_paid:
                raise InvalidStateError(f'Booking {booking_id} is already paid')

            if booking.exclusive_slot:
                holder = await uow.booking_command_repo.find_active_paid_in_cell(
                    campaign_id=booking.campaign_id,
                    route_id=booking.route_id,
                    industry_id=booking.industry_id,
                )
                if holder and holder.id != booking.id:
                    self.metrics.record_slot_conflict(stage='checkout')
                    raise SlotTakenError(
                        'This slot was already purchased by another customer for this campaign'
                    )

            if booking.payment_status == PaymentStatus.FAILED:
                booking = await uow.booking_command_repo.update_payment_status(
                    booking=booking.restart_payment(now=self.clock()),
                    expected_status=PaymentStatus.FAILED,
                )
                await uow.commit()
                Logger.base.info(f'🔁 [CHECKOUT] Payment of booking {booking_id} reopened')

        return Checkout(booking=booking, amount_due=booking.amount_due)
