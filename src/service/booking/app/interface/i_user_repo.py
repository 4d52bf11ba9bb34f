from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.entity.user_entity import User


class IUserRepo(ABC):
    @abstractmethod
    async def create(self, *, user: User) -> User:
        pass

    @abstractmethod
    async def get_by_id(self, *, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update_loyalty(self, *, user: User) -> User:
        pass

    @abstractmethod
    async def reserve_loyalty_discount(self, *, user_id: str, year: int) -> bool:
        """
        Atomic available -= 1 guarded by available > 0 and the reset year

        Returns:
            True if a discount was reserved
        """
        pass

    @abstractmethod
    async def release_loyalty_discount(self, *, user_id: str) -> None:
        """Atomic available += 1"""
        pass
