from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence

from sqlalchemy import and_, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
import uuid_utils

from src.platform.exception.exceptions import InvalidStateError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_pricing_rule_repo import IPricingRuleRepo
from src.service.booking.domain.entity.pricing_rule_entity import PricingRule
from src.service.booking.domain.enum.pricing_enum import PricingRuleStatus, PricingRuleType
from src.service.booking.driven_adapter.model.pricing_rule_model import (
    PricingRuleApplicationModel,
    PricingRuleModel,
)


rule_table = PricingRuleModel.__table__
application_table = PricingRuleApplicationModel.__table__


class PricingRuleRepoImpl(IPricingRuleRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> PricingRule:
        values = dict(row)
        values['rule_type'] = PricingRuleType(values['rule_type'])
        values['status'] = PricingRuleStatus(values['status'])
        return PricingRule(**values)

    @Logger.io
    async def create(self, *, rule: PricingRule) -> PricingRule:
        await self.session.execute(
            insert(rule_table).values(
                id=rule.id,
                rule_type=rule.rule_type,
                value=rule.value,
                priority=rule.priority,
                campaign_id=rule.campaign_id,
                user_id=rule.user_id,
                usage_limit=rule.usage_limit,
                usage_count=rule.usage_count,
                status=rule.status,
                description=rule.description,
                created_at=rule.created_at,
            )
        )
        return rule

    @Logger.io
    async def list_candidates(self, *, campaign_id: str, user_id: str) -> List[PricingRule]:
        stmt = (
            select(rule_table)
            .where(
                rule_table.c.status == PricingRuleStatus.ACTIVE,
                or_(
                    rule_table.c.user_id == user_id,
                    and_(
                        rule_table.c.user_id.is_(None),
                        or_(
                            rule_table.c.campaign_id.is_(None),
                            rule_table.c.campaign_id == campaign_id,
                        ),
                    ),
                ),
            )
            .order_by(rule_table.c.priority.desc(), rule_table.c.id)
        )
        rows = (await self.session.execute(stmt)).mappings().all()
        return [self._row_to_entity(row) for row in rows]

    @Logger.io
    async def count_user_applications(
        self, *, user_id: str, rule_ids: Sequence[str]
    ) -> Dict[str, int]:
        if not rule_ids:
            return {}
        stmt = (
            select(application_table.c.pricing_rule_id, func.count())
            .where(
                application_table.c.user_id == user_id,
                application_table.c.pricing_rule_id.in_(rule_ids),
            )
            .group_by(application_table.c.pricing_rule_id)
        )
        return {rule_id: count for rule_id, count in (await self.session.execute(stmt)).all()}

    @Logger.io
    async def record_application(
        self, *, rule_id: str, booking_id: str, user_id: str, applied_at: datetime
    ) -> bool:
        already_recorded = (
            await self.session.execute(
                select(application_table.c.id).where(
                    application_table.c.pricing_rule_id == rule_id,
                    application_table.c.booking_id == booking_id,
                )
            )
        ).first()
        if already_recorded:
            return False

        # Consume one use, refusing if a concurrent booking took the last one
        consumed = (
            await self.session.execute(
                update(rule_table)
                .where(
                    rule_table.c.id == rule_id,
                    or_(
                        rule_table.c.usage_limit.is_(None),
                        rule_table.c.usage_count < rule_table.c.usage_limit,
                    ),
                )
                .values(usage_count=rule_table.c.usage_count + 1)
                .returning(rule_table.c.id)
            )
        ).first()
        if consumed is None:
            raise InvalidStateError(f'Pricing rule {rule_id} has reached its usage limit')

        await self.session.execute(
            insert(application_table).values(
                id=str(uuid_utils.uuid7()),
                pricing_rule_id=rule_id,
                booking_id=booking_id,
                user_id=user_id,
                applied_at=applied_at,
            )
        )
        return True
