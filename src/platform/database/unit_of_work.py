"""
Unit of Work Pattern - one database session and transaction per lifecycle operation

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories share the UoW session, so a booking transition and the
  campaign counter update it implies commit or roll back together
- Leaving the block without commit() rolls back
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


if TYPE_CHECKING:
    from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
    from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
    from src.service.booking.app.interface.i_campaign_repo import ICampaignRepo
    from src.service.booking.app.interface.i_notification_dismissal_repo import (
        INotificationDismissalRepo,
    )
    from src.service.booking.app.interface.i_pricing_rule_repo import IPricingRuleRepo
    from src.service.booking.app.interface.i_slot_dimension_repo import ISlotDimensionRepo
    from src.service.booking.app.interface.i_user_repo import IUserRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            booking = await uow.booking_command_repo.create(booking=...)
            await uow.commit()
    """

    booking_command_repo: IBookingCommandRepo
    booking_query_repo: IBookingQueryRepo
    campaign_repo: ICampaignRepo
    slot_dimension_repo: ISlotDimensionRepo
    pricing_rule_repo: IPricingRuleRepo
    user_repo: IUserRepo
    notification_dismissal_repo: INotificationDismissalRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self.session: AsyncSession | None = None

    async def __aenter__(self):
        from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
            BookingCommandRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.booking_query_repo_impl import (
            BookingQueryRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.campaign_repo_impl import CampaignRepoImpl
        from src.service.booking.driven_adapter.repo.notification_dismissal_repo_impl import (
            NotificationDismissalRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.pricing_rule_repo_impl import (
            PricingRuleRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.slot_dimension_repo_impl import (
            SlotDimensionRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.user_repo_impl import UserRepoImpl

        self.session = self._session_maker()
        self.booking_command_repo = BookingCommandRepoImpl(session=self.session)
        self.booking_query_repo = BookingQueryRepoImpl(session=self.session)
        self.campaign_repo = CampaignRepoImpl(session=self.session)
        self.slot_dimension_repo = SlotDimensionRepoImpl(session=self.session)
        self.pricing_rule_repo = PricingRuleRepoImpl(session=self.session)
        self.user_repo = UserRepoImpl(session=self.session)
        self.notification_dismissal_repo = NotificationDismissalRepoImpl(session=self.session)
        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self):
        assert self.session is not None, 'UnitOfWork used outside of `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
