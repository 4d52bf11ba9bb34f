from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking


class SetPriceOverrideUseCase:
    """
    Admin sets (or clears with None) the price charged at checkout,
    bypassing the pricing resolver for this booking only.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(
        self, *, booking_id: str, price_override: Optional[int], note: Optional[str] = None
    ) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_id_for_update(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')
            updated = await uow.booking_command_repo.update_review(
                booking=booking.set_price_override(price_override=price_override, note=note)
            )
            await uow.commit()

        Logger.base.info(f'🏷️ [PRICE-OVERRIDE] Booking {booking_id} override={price_override}')
        return updated
