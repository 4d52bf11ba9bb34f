from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_slot_dimension_repo import ISlotDimensionRepo
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route
from src.service.booking.driven_adapter.model.slot_dimension_model import (
    IndustryModel,
    RouteModel,
)


route_table = RouteModel.__table__
industry_table = IndustryModel.__table__


def route_row_to_entity(row: Mapping[str, Any]) -> Route:
    return Route(**dict(row))


def industry_row_to_entity(row: Mapping[str, Any]) -> Industry:
    return Industry(**dict(row))


class SlotDimensionRepoImpl(ISlotDimensionRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create_route(self, *, route: Route) -> Route:
        await self.session.execute(
            insert(route_table).values(
                id=route.id,
                zip_code=route.zip_code,
                name=route.name,
                household_count=route.household_count,
                active=route.active,
                created_at=route.created_at,
            )
        )
        return route

    @Logger.io
    async def create_industry(self, *, industry: Industry) -> Industry:
        await self.session.execute(
            insert(industry_table).values(
                id=industry.id,
                name=industry.name,
                is_unlimited=industry.is_unlimited,
                description=industry.description,
                active=industry.active,
                created_at=industry.created_at,
            )
        )
        return industry

    @Logger.io
    async def get_route(self, *, route_id: str) -> Optional[Route]:
        row = (
            (await self.session.execute(select(route_table).where(route_table.c.id == route_id)))
            .mappings()
            .first()
        )
        return route_row_to_entity(row) if row else None

    @Logger.io
    async def get_industry(self, *, industry_id: str) -> Optional[Industry]:
        row = (
            (
                await self.session.execute(
                    select(industry_table).where(industry_table.c.id == industry_id)
                )
            )
            .mappings()
            .first()
        )
        return industry_row_to_entity(row) if row else None

    @Logger.io
    async def list_routes(self, *, route_ids: Sequence[str] | None = None) -> List[Route]:
        stmt = select(route_table).order_by(route_table.c.zip_code, route_table.c.name)
        if route_ids is not None:
            stmt = stmt.where(route_table.c.id.in_(route_ids))
        rows = (await self.session.execute(stmt)).mappings().all()
        return [route_row_to_entity(row) for row in rows]

    @Logger.io
    async def list_industries(self, *, industry_ids: Sequence[str] | None = None) -> List[Industry]:
        stmt = select(industry_table).order_by(industry_table.c.name)
        if industry_ids is not None:
            stmt = stmt.where(industry_table.c.id.in_(industry_ids))
        rows = (await self.session.execute(stmt)).mappings().all()
        return [industry_row_to_entity(row) for row in rows]
