"""
Test helpers for unit tests

Builders for domain entities plus a FakeUnitOfWork whose repositories are
AsyncMocks, so use cases can be driven without a database.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock, Mock

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.booking.domain.entity.booking_entity import Booking, CancellationResult
from src.service.booking.domain.entity.campaign_entity import Campaign
from src.service.booking.domain.entity.pricing_rule_entity import PricingRule
from src.service.booking.domain.entity.slot_dimension_entity import Industry, Route
from src.service.booking.domain.entity.user_entity import User, UserRole
from src.service.booking.domain.enum.booking_enum import BookingStatus
from src.service.booking.domain.enum.campaign_status import CampaignStatus
from src.service.booking.domain.enum.pricing_enum import PricingRuleType


NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)

CAMPAIGN_ID = '01936d8f-0000-7000-8000-00000000c001'
ROUTE_ID = '01936d8f-0000-7000-8000-00000000r001'
INDUSTRY_ID = '01936d8f-0000-7000-8000-00000000i001'
OTHER_INDUSTRY_ID = '01936d8f-0000-7000-8000-00000000i999'
USER_ID = '01936d8f-0000-7000-8000-00000000u001'
ADMIN_ID = '01936d8f-0000-7000-8000-00000000a001'
BOOKING_ID = '01936d8f-0000-7000-8000-00000000b001'


def fixed_clock() -> datetime:
    return NOW


def make_campaign(**overrides: Any) -> Campaign:
    values: dict[str, Any] = {
        'id': CAMPAIGN_ID,
        'name': 'Spring 2026',
        'mail_date': NOW + timedelta(days=30),
        'print_deadline': NOW + timedelta(days=20),
        'status': CampaignStatus.BOOKING_OPEN,
        'total_slots': 4,
        'created_at': NOW - timedelta(days=10),
    }
    values.update(overrides)
    return Campaign(**values)


def make_user(**overrides: Any) -> User:
    values: dict[str, Any] = {
        'id': USER_ID,
        'email': 'owner@sunrise.example',
        'name': 'Ada',
        'role': UserRole.CUSTOMER,
        'loyalty_year_reset': NOW.year,
    }
    values.update(overrides)
    return User(**values)


def make_admin(**overrides: Any) -> User:
    return make_user(id=ADMIN_ID, email='admin@mailer.example', role=UserRole.ADMIN, **overrides)


def make_route(**overrides: Any) -> Route:
    values: dict[str, Any] = {'id': ROUTE_ID, 'zip_code': '94110', 'name': 'Mission'}
    values.update(overrides)
    return Route(**values)


def make_industry(**overrides: Any) -> Industry:
    values: dict[str, Any] = {'id': INDUSTRY_ID, 'name': 'Bakery'}
    values.update(overrides)
    return Industry(**values)


def make_rule(**overrides: Any) -> PricingRule:
    values: dict[str, Any] = {
        'id': '01936d8f-0000-7000-8000-0000000p0001',
        'rule_type': PricingRuleType.DISCOUNT_AMOUNT,
        'value': 10000,
    }
    values.update(overrides)
    return PricingRule(**values)


def make_booking(**overrides: Any) -> Booking:
    values: dict[str, Any] = {
        'id': BOOKING_ID,
        'user_id': USER_ID,
        'campaign_id': CAMPAIGN_ID,
        'route_id': ROUTE_ID,
        'industry_id': INDUSTRY_ID,
        'business_name': 'Sunrise Bakery',
        'contact_email': 'owner@sunrise.example',
        'quantity': 1,
        'amount': 60000,
        'pending_since': NOW - timedelta(minutes=5),
        'created_at': NOW - timedelta(minutes=5),
    }
    values.update(overrides)
    return Booking(**values)


def cancelled(booking: Booking, **overrides: Any) -> Booking:
    values: dict[str, Any] = {
        'status': BookingStatus.CANCELLED,
        'cancellation_date': NOW,
        'artwork_file_path': None,
        'logo_file_path': None,
        'optional_image_path': None,
    }
    values.update(overrides)
    return attrs.evolve(booking, **values)


class FakeUnitOfWork(AbstractUnitOfWork):
    """
    Repositories are AsyncMocks; commit/rollback calls are counted.

    Example:
        ```python
        uow = FakeUnitOfWork(booking=some_booking)
        use_case = SomeUseCase(uow_factory=lambda: uow, ...)
        await use_case.execute(...)
        assert uow.committed == 1
        ```
    """

    def __init__(
        self,
        *,
        booking: Optional[Booking] = None,
        campaign: Optional[Campaign] = None,
        user: Optional[User] = None,
    ) -> None:
        self.committed = 0
        self.rolled_back = 0

        self.booking_command_repo = AsyncMock()
        self.booking_command_repo.get_by_id = AsyncMock(return_value=booking)
        self.booking_command_repo.get_by_id_for_update = AsyncMock(return_value=booking)
        self.booking_command_repo.find_active_paid_in_cell = AsyncMock(return_value=None)
        self.booking_command_repo.create = AsyncMock(side_effect=self._echo_booking)
        self.booking_command_repo.update_to_paid = AsyncMock(side_effect=self._echo_booking)
        self.booking_command_repo.update_review = AsyncMock(side_effect=self._echo_booking)
        self.booking_command_repo.update_payment_status = AsyncMock(
            side_effect=self._echo_payment
        )
        if booking is not None:
            self.booking_command_repo.cancel = AsyncMock(
                return_value=CancellationResult(booking=cancelled(booking), cancelled_now=True)
            )

        self.booking_query_repo = AsyncMock()
        self.booking_query_repo.list_expired_pending = AsyncMock(return_value=[])

        self.campaign_repo = AsyncMock()
        self.campaign_repo.get_by_id = AsyncMock(return_value=campaign)
        self.campaign_repo.list_routes = AsyncMock(return_value=[make_route()])
        self.campaign_repo.list_industries = AsyncMock(return_value=[make_industry()])

        self.slot_dimension_repo = AsyncMock()
        self.slot_dimension_repo.get_route = AsyncMock(return_value=make_route())
        self.slot_dimension_repo.get_industry = AsyncMock(return_value=make_industry())

        self.pricing_rule_repo = AsyncMock()
        self.pricing_rule_repo.list_candidates = AsyncMock(return_value=[])
        self.pricing_rule_repo.count_user_applications = AsyncMock(return_value={})
        self.pricing_rule_repo.record_application = AsyncMock(return_value=True)

        self.user_repo = AsyncMock()
        self.user_repo.get_by_id = AsyncMock(return_value=user)
        self.user_repo.get_by_id_for_update = AsyncMock(return_value=user)
        self.user_repo.update_loyalty = AsyncMock(side_effect=lambda *, user: user)
        self.user_repo.reserve_loyalty_discount = AsyncMock(return_value=True)

        self.notification_dismissal_repo = AsyncMock()

    async def _echo_booking(self, *, booking: Booking) -> Booking:
        return booking

    async def _echo_payment(self, *, booking: Booking, expected_status: Any) -> Booking:
        return booking

    async def _commit(self) -> None:
        self.committed += 1

    async def rollback(self) -> None:
        self.rolled_back += 1


def make_metrics() -> Mock:
    return Mock()
