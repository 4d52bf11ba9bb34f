from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route


class ISlotDimensionRepo(ABC):
    @abstractmethod
    async def create_route(self, *, route: Route) -> Route:
        pass

    @abstractmethod
    async def create_industry(self, *, industry: Industry) -> Industry:
        pass

    @abstractmethod
    async def get_route(self, *, route_id: str) -> Optional[Route]:
        pass

    @abstractmethod
    async def get_industry(self, *, industry_id: str) -> Optional[Industry]:
        pass

    @abstractmethod
    async def list_routes(self, *, route_ids: Sequence[str] | None = None) -> List[Route]:
        pass

    @abstractmethod
    async def list_industries(self, *, industry_ids: Sequence[str] | None = None) -> List[Industry]:
        pass
