from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route


class ICampaignRepo(ABC):
    @abstractmethod
    async def create(
        self, *, campaign: Campaign, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> Campaign:
        pass

    @abstractmethod
    async def get_by_id(self, *, campaign_id: str) -> Optional[Campaign]:
        pass

    @abstractmethod
    async def update(self, *, campaign: Campaign) -> Campaign:
        """Persist name, schedule, slot prices and status (counters are never written here)"""
        pass

    @abstractmethod
    async def replace_offering(
        self, *, campaign_id: str, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> Campaign:
        """Replace attached routes/industries and recompute total_slots"""
        pass

    @abstractmethod
    async def list_routes(self, *, campaign_id: str) -> List[Route]:
        pass

    @abstractmethod
    async def list_industries(self, *, campaign_id: str) -> List[Industry]:
        pass

    @abstractmethod
    async def add_paid_booking(self, *, campaign_id: str, quantity: int, amount: int) -> None:
        """Atomic booked_slots += quantity, revenue += amount"""
        pass

    @abstractmethod
    async def remove_paid_booking(self, *, campaign_id: str, quantity: int, amount: int) -> None:
        """Atomic booked_slots -= quantity, revenue -= amount, each floored at zero"""
        pass
