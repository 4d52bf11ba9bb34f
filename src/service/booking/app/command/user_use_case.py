from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
import uuid_utils

from src.platform.clock import Clock, utc_now
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.user_entity import User, UserRole


class UserUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, clock: Clock = utc_now) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock)

    @Logger.io
    async def create_user(
        self, *, email: str, name: str, role: UserRole = UserRole.CUSTOMER
    ) -> User:
        if '@' not in email or not name.strip():
            raise InvalidArgumentError('A valid email and a name are required')
        now = self.clock()
        user = User(
            id=str(uuid_utils.uuid7()),
            email=email.strip().lower(),
            name=name.strip(),
            role=role,
            loyalty_year_reset=now.year,
            created_at=now,
        )
        async with self.uow_factory() as uow:
            user = await uow.user_repo.create(user=user)
            await uow.commit()
        return user

    @Logger.io
    async def get_user(self, *, user_id: str) -> User:
        async with self.uow_factory() as uow:
            user = await uow.user_repo.get_by_id(user_id=user_id)
        if not user:
            raise NotFoundError('User not found')
        return user
