from datetime import datetime
from enum import StrEnum
from typing import Optional

import attrs


class UserRole(StrEnum):
    CUSTOMER = 'customer'
    ADMIN = 'admin'


@attrs.define
class User:
    id: str
    email: str
    name: str
    role: UserRole = UserRole.CUSTOMER
    loyalty_slots_earned: int = 0
    loyalty_discounts_available: int = 0
    loyalty_year_reset: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def has_loyalty_discount(self, *, year: int) -> bool:
        # Discounts earned in a previous year have lapsed
        return self.loyalty_year_reset == year and self.loyalty_discounts_available > 0

    def with_paid_slots(self, *, quantity: int, year: int, threshold: int) -> 'User':
        """
        Count regular-price slots toward the yearly loyalty reward.

        Every time the running total crosses a multiple of `threshold`
        one more discount becomes available.
        """
        earned, available = self.loyalty_slots_earned, self.loyalty_discounts_available
        if self.loyalty_year_reset != year:
            earned, available = 0, 0

        new_earned = earned + quantity
        unlocked = new_earned // threshold - earned // threshold if threshold > 0 else 0
        return attrs.evolve(
            self,
            loyalty_slots_earned=new_earned,
            loyalty_discounts_available=available + unlocked,
            loyalty_year_reset=year,
        )
