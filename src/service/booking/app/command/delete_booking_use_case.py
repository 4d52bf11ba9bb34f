from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.booking_file_cleanup import delete_files_best_effort
from src.service.booking.app.interface.i_blob_store import IBlobStore
from src.service.booking.domain.entity.booking_entity import Booking


class DeleteBookingUseCase:
    """
    Admin hard delete. Counters are released in the same transaction when
    the booking was active and paid; pricing rule applications are kept.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, blob_store: IBlobStore) -> None:
        self.uow_factory = uow_factory
        self.blob_store = blob_store

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        blob_store: IBlobStore = Depends(Provide[Container.blob_store]),
    ) -> Self:
        return cls(uow_factory=uow_factory, blob_store=blob_store)

    @Logger.io
    async def execute(self, *, booking_id: str) -> Booking:
        async with self.uow_factory() as uow:
            await uow.notification_dismissal_repo.delete_for_booking(booking_id=booking_id)
            deleted = await uow.booking_command_repo.delete(booking_id=booking_id)
            if not deleted:
                raise NotFoundError('Booking not found')

            if deleted.is_active and deleted.is_paid:
                await uow.campaign_repo.remove_paid_booking(
                    campaign_id=deleted.campaign_id,
                    quantity=deleted.quantity,
                    amount=deleted.settled_amount,
                )
            elif deleted.is_active and deleted.loyalty_discount_applied:
                await uow.user_repo.release_loyalty_discount(user_id=deleted.user_id)

            await uow.commit()

        if deleted.file_paths:
            await delete_files_best_effort(
                blob_store=self.blob_store, paths=deleted.file_paths, booking_id=booking_id
            )
        Logger.base.info(f'🗑️ [DELETE] Booking {booking_id} deleted')
        return deleted
