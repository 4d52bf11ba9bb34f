from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Sequence

from src.service.booking.domain.entity.pricing_rule_entity import PricingRule


class IPricingRuleRepo(ABC):
    @abstractmethod
    async def create(self, *, rule: PricingRule) -> PricingRule:
        pass

    @abstractmethod
    async def list_candidates(self, *, campaign_id: str, user_id: str) -> List[PricingRule]:
        """Active rules that are global, scoped to this campaign, or scoped to this user"""
        pass

    @abstractmethod
    async def count_user_applications(
        self, *, user_id: str, rule_ids: Sequence[str]
    ) -> Dict[str, int]:
        """
        Returns:
            rule_id -> number of recorded applications by this user (missing means 0)
        """
        pass

    @abstractmethod
    async def record_application(
        self, *, rule_id: str, booking_id: str, user_id: str, applied_at: datetime
    ) -> bool:
        """
        Insert the audit row and bump the rule's usage_count atomically

        Returns:
            False when this booking already consumed the rule (nothing changed)
        """
        pass
