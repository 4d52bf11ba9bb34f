"""
Request Cancellation Use Case

Customer or admin asks to cancel a booking:
1. Owner or admin only
2. Refused once the campaign has gone to print
3. Refund computed from the refund policy (admins may waive the processing fee)
4. Idempotent cancel, then best-effort cleanup of the booking's files
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.booking_file_cleanup import delete_files_best_effort
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.interface.i_blob_store import IBlobStore
from src.service.booking.domain.entity.booking_entity import CancellationResult
from src.service.booking.domain.refund_policy import RefundDecision, RefundPolicy


class RequestCancellationUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        cancel_booking: CancelBookingUseCase,
        blob_store: IBlobStore,
        refund_policy: RefundPolicy,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.cancel_booking = cancel_booking
        self.blob_store = blob_store
        self.refund_policy = refund_policy
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        cancel_booking: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
        blob_store: IBlobStore = Depends(Provide[Container.blob_store]),
        refund_policy: RefundPolicy = Depends(Provide[Container.refund_policy]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            cancel_booking=cancel_booking,
            blob_store=blob_store,
            refund_policy=refund_policy,
            clock=clock,
        )

    @Logger.io
    async def execute(
        self, *, booking_id: str, acting_user_id: str, waive_fee: bool = False
    ) -> CancellationResult:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            actor = await uow.user_repo.get_by_id(user_id=acting_user_id)
            if not actor:
                raise NotFoundError('User not found')
            if booking.user_id != actor.id and not actor.is_admin:
                raise ForbiddenError('Only the customer who booked or an admin can cancel')

            decision = RefundDecision.none()
            if booking.is_active:
                campaign = await uow.campaign_repo.get_by_id(campaign_id=booking.campaign_id)
                if not campaign:
                    raise NotFoundError('Campaign not found')
                if campaign.is_cancellation_locked:
                    raise InvalidStateError(
                        f'Campaign {campaign.name} is {campaign.status}, '
                        'bookings can no longer be cancelled'
                    )
                decision = self.refund_policy.decide(
                    booking=booking,
                    campaign=campaign,
                    now=self.clock(),
                    waive_fee=waive_fee and actor.is_admin,
                )

        files = booking.file_paths
        result = await self.cancel_booking.execute(
            booking_id=booking_id,
            refund_amount=decision.amount,
            refund_status=decision.status,
            reason='admin' if actor.is_admin else 'customer',
        )
        if result.cancelled_now and files:
            await delete_files_best_effort(
                blob_store=self.blob_store, paths=files, booking_id=booking_id
            )
        return result
