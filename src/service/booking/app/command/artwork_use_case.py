"""
Artwork Use Case

Customer uploads and admin review of the ad design:
    pending_upload -> under_review -> approved | rejected
    rejected -> under_review (re-upload)

Uploading replaces the previous artwork file; the old file is removed
from the blob store once the new path is committed.
"""

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.booking_file_cleanup import delete_files_best_effort
from src.service.booking.app.interface.i_blob_store import IBlobStore
from src.service.booking.domain.entity.booking_entity import Booking


class ArtworkUseCase:
    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, blob_store: IBlobStore, clock: Clock = utc_now
    ) -> None:
        self.uow_factory = uow_factory
        self.blob_store = blob_store
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        blob_store: IBlobStore = Depends(Provide[Container.blob_store]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, blob_store=blob_store, clock=clock)

    @staticmethod
    def _ensure_owner(booking: Booking, *, user_id: str) -> None:
        if booking.user_id != user_id:
            raise ForbiddenError('Only the customer who booked can upload files')

    @Logger.io
    async def submit_artwork(self, *, booking_id: str, user_id: str, file_path: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            self._ensure_owner(booking, user_id=user_id)
            replaced = booking.artwork_file_path

            submitted = await uow.booking_command_repo.update_review(
                booking=booking.submit_artwork(file_path=file_path, now=self.clock())
            )
            await uow.commit()

        if replaced and replaced != file_path:
            await delete_files_best_effort(
                blob_store=self.blob_store, paths=[replaced], booking_id=booking_id
            )
        Logger.base.info(f'🎨 [ARTWORK] Booking {booking_id} artwork submitted for review')
        return submitted

    @Logger.io
    async def approve_artwork(self, *, booking_id: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            approved = await uow.booking_command_repo.update_review(
                booking=booking.approve_artwork(now=self.clock())
            )
            await uow.commit()

        Logger.base.info(f'✅ [ARTWORK] Booking {booking_id} artwork approved')
        return approved

    @Logger.io
    async def reject_artwork(self, *, booking_id: str, reason: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            rejected = await uow.booking_command_repo.update_review(
                booking=booking.reject_artwork(reason=reason, now=self.clock())
            )
            await uow.commit()

        Logger.base.info(f'🚫 [ARTWORK] Booking {booking_id} artwork rejected')
        return rejected

    @Logger.io
    async def attach_assets(
        self,
        *,
        booking_id: str,
        user_id: str,
        logo_file_path: Optional[str] = None,
        optional_image_path: Optional[str] = None,
    ) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            self._ensure_owner(booking, user_id=user_id)
            replaced = [
                old
                for old, new in (
                    (booking.logo_file_path, logo_file_path),
                    (booking.optional_image_path, optional_image_path),
                )
                if old and new and old != new
            ]

            updated = await uow.booking_command_repo.update_review(
                booking=booking.attach_assets(
                    logo_file_path=logo_file_path, optional_image_path=optional_image_path
                )
            )
            await uow.commit()

        if replaced:
            await delete_files_best_effort(
                blob_store=self.blob_store, paths=replaced, booking_id=booking_id
            )
        return updated
