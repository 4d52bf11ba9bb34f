from typing import Any, Mapping, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_user_repo import IUserRepo
from src.service.booking.domain.entity.user_entity import User, UserRole
from src.service.booking.driven_adapter.model.user_model import UserModel


user_table = UserModel.__table__


class UserRepoImpl(IUserRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> User:
        values = dict(row)
        values['role'] = UserRole(values['role'])
        return User(**values)

    @Logger.io
    async def create(self, *, user: User) -> User:
        try:
            await self.session.execute(
                insert(user_table).values(
                    id=user.id,
                    email=user.email,
                    name=user.name,
                    role=user.role,
                    loyalty_slots_earned=user.loyalty_slots_earned,
                    loyalty_discounts_available=user.loyalty_discounts_available,
                    loyalty_year_reset=user.loyalty_year_reset,
                    created_at=user.created_at,
                )
            )
        except IntegrityError as e:
            raise ConflictError(f'User with email {user.email} already exists') from e
        return user

    @Logger.io
    async def get_by_id(self, *, user_id: str) -> Optional[User]:
        stmt = select(user_table).where(user_table.c.id == user_id)
        row = (await self.session.execute(stmt)).mappings().first()
        return self._row_to_entity(row) if row else None

    @Logger.io
    async def get_by_id_for_update(self, *, user_id: str) -> Optional[User]:
        stmt = select(user_table).where(user_table.c.id == user_id).with_for_update()
        row = (await self.session.execute(stmt)).mappings().first()
        return self._row_to_entity(row) if row else None

    @Logger.io
    async def update_loyalty(self, *, user: User) -> User:
        row = (
            (
                await self.session.execute(
                    update(user_table)
                    .where(user_table.c.id == user.id)
                    .values(
                        loyalty_slots_earned=user.loyalty_slots_earned,
                        loyalty_discounts_available=user.loyalty_discounts_available,
                        loyalty_year_reset=user.loyalty_year_reset,
                    )
                    .returning(*user_table.c)
                )
            )
            .mappings()
            .first()
        )
        if row is None:
            raise NotFoundError(f'User {user.id} not found')
        return self._row_to_entity(row)

    @Logger.io
    async def reserve_loyalty_discount(self, *, user_id: str, year: int) -> bool:
        reserved = (
            await self.session.execute(
                update(user_table)
                .where(
                    user_table.c.id == user_id,
                    user_table.c.loyalty_year_reset == year,
                    user_table.c.loyalty_discounts_available > 0,
                )
                .values(loyalty_discounts_available=user_table.c.loyalty_discounts_available - 1)
                .returning(user_table.c.id)
            )
        ).first()
        return reserved is not None

    @Logger.io
    async def release_loyalty_discount(self, *, user_id: str) -> None:
        await self.session.execute(
            update(user_table)
            .where(user_table.c.id == user_id)
            .values(loyalty_discounts_available=user_table.c.loyalty_discounts_available + 1)
        )
