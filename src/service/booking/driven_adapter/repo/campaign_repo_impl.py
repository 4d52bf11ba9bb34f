from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy import case, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_campaign_repo import ICampaignRepo
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route
from src.service.booking.domain.enum.campaign_status import CampaignStatus
from src.service.booking.driven_adapter.model.campaign_model import (
    CampaignModel,
    campaign_industry_table,
    campaign_route_table,
)
from src.service.booking.driven_adapter.repo.slot_dimension_repo_impl import (
    industry_row_to_entity,
    industry_table,
    route_row_to_entity,
    route_table,
)


campaign_table = CampaignModel.__table__


def _floored_decrement(column: Any, delta: int) -> Any:
    return case((column > delta, column - delta), else_=0)


class CampaignRepoImpl(ICampaignRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> Campaign:
        return Campaign(
            id=row['id'],
            name=row['name'],
            mail_date=row['mail_date'],
            print_deadline=row['print_deadline'],
            status=CampaignStatus(row['status']),
            total_slots=row['total_slots'],
            booked_slots=row['booked_slots'],
            revenue=row['revenue'],
            base_slot_price=row['base_slot_price'],
            additional_slot_price=row['additional_slot_price'],
            created_at=row['created_at'],
        )

    async def _attach_offering(
        self, *, campaign_id: str, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> None:
        if route_ids:
            await self.session.execute(
                insert(campaign_route_table),
                [{'campaign_id': campaign_id, 'route_id': route_id} for route_id in route_ids],
            )
        if industry_ids:
            await self.session.execute(
                insert(campaign_industry_table),
                [
                    {'campaign_id': campaign_id, 'industry_id': industry_id}
                    for industry_id in industry_ids
                ],
            )

    @Logger.io
    async def create(
        self, *, campaign: Campaign, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> Campaign:
        await self.session.execute(
            insert(campaign_table).values(
                id=campaign.id,
                name=campaign.name,
                mail_date=campaign.mail_date,
                print_deadline=campaign.print_deadline,
                status=campaign.status,
                total_slots=campaign.total_slots,
                booked_slots=campaign.booked_slots,
                revenue=campaign.revenue,
                base_slot_price=campaign.base_slot_price,
                additional_slot_price=campaign.additional_slot_price,
                created_at=campaign.created_at,
            )
        )
        await self._attach_offering(
            campaign_id=campaign.id, route_ids=route_ids, industry_ids=industry_ids
        )
        return campaign

    @Logger.io
    async def get_by_id(self, *, campaign_id: str) -> Optional[Campaign]:
        stmt = select(campaign_table).where(campaign_table.c.id == campaign_id)
        row = (await self.session.execute(stmt)).mappings().first()
        return self._row_to_entity(row) if row else None

    @Logger.io
    async def update(self, *, campaign: Campaign) -> Campaign:
        row = (
            (
                await self.session.execute(
                    update(campaign_table)
                    .where(campaign_table.c.id == campaign.id)
                    .values(
                        name=campaign.name,
                        mail_date=campaign.mail_date,
                        print_deadline=campaign.print_deadline,
                        status=campaign.status,
                        base_slot_price=campaign.base_slot_price,
                        additional_slot_price=campaign.additional_slot_price,
                    )
                    .returning(*campaign_table.c)
                )
            )
            .mappings()
            .first()
        )
        if row is None:
            raise NotFoundError(f'Campaign {campaign.id} not found')
        return self._row_to_entity(row)

    @Logger.io
    async def replace_offering(
        self, *, campaign_id: str, route_ids: Sequence[str], industry_ids: Sequence[str]
    ) -> Campaign:
        await self.session.execute(
            delete(campaign_route_table).where(campaign_route_table.c.campaign_id == campaign_id)
        )
        await self.session.execute(
            delete(campaign_industry_table).where(
                campaign_industry_table.c.campaign_id == campaign_id
            )
        )
        await self._attach_offering(
            campaign_id=campaign_id, route_ids=route_ids, industry_ids=industry_ids
        )
        row = (
            (
                await self.session.execute(
                    update(campaign_table)
                    .where(campaign_table.c.id == campaign_id)
                    .values(total_slots=len(route_ids) * len(industry_ids))
                    .returning(*campaign_table.c)
                )
            )
            .mappings()
            .first()
        )
        if row is None:
            raise NotFoundError(f'Campaign {campaign_id} not found')
        return self._row_to_entity(row)

    @Logger.io
    async def list_routes(self, *, campaign_id: str) -> List[Route]:
        rows = (
            (
                await self.session.execute(
                    select(route_table)
                    .join(campaign_route_table, campaign_route_table.c.route_id == route_table.c.id)
                    .where(campaign_route_table.c.campaign_id == campaign_id)
                    .order_by(route_table.c.zip_code, route_table.c.name)
                )
            )
            .mappings()
            .all()
        )
        return [route_row_to_entity(row) for row in rows]

    @Logger.io
    async def list_industries(self, *, campaign_id: str) -> List[Industry]:
        rows = (
            (
                await self.session.execute(
                    select(industry_table)
                    .join(
                        campaign_industry_table,
                        campaign_industry_table.c.industry_id == industry_table.c.id,
                    )
                    .where(campaign_industry_table.c.campaign_id == campaign_id)
                    .order_by(industry_table.c.name)
                )
            )
            .mappings()
            .all()
        )
        return [industry_row_to_entity(row) for row in rows]

    @Logger.io
    async def add_paid_booking(self, *, campaign_id: str, quantity: int, amount: int) -> None:
        await self.session.execute(
            update(campaign_table)
            .where(campaign_table.c.id == campaign_id)
            .values(
                booked_slots=campaign_table.c.booked_slots + quantity,
                revenue=campaign_table.c.revenue + amount,
            )
        )

    @Logger.io
    async def remove_paid_booking(self, *, campaign_id: str, quantity: int, amount: int) -> None:
        await self.session.execute(
            update(campaign_table)
            .where(campaign_table.c.id == campaign_id)
            .values(
                booked_slots=_floored_decrement(campaign_table.c.booked_slots, quantity),
                revenue=_floored_decrement(campaign_table.c.revenue, amount),
            )
        )
