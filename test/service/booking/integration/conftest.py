"""
Integration fixtures: a seeded campaign on a throwaway SQLite database.

Seed:
- customers Ada and Grace, one admin
- route Mission (94110)
- industries Bakery (exclusive) and Other (unlimited)
- campaign open for booking, mailing in 30 days
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from src.platform.clock import utc_now
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.booking.app.command.campaign_use_case import CampaignUseCase
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.mark_booking_paid_use_case import MarkBookingPaidUseCase
from src.service.booking.app.command.user_use_case import UserUseCase
from src.service.booking.domain.entity.user_entity import UserRole
from src.service.booking.domain.enum.campaign_status import CampaignStatus
from src.service.booking.domain.pricing.price_quote import PricingDefaults
from test.service.booking.integration.helpers import Seed


@pytest.fixture
def metrics() -> Mock:
    return Mock()


@pytest.fixture
async def seed(uow_factory: UnitOfWorkFactory) -> Seed:
    users = UserUseCase(uow_factory=uow_factory)
    ada = await users.create_user(email='ada@sunrise.example', name='Ada')
    grace = await users.create_user(email='grace@harbor.example', name='Grace')
    admin = await users.create_user(
        email='admin@mailer.example', name='Admin', role=UserRole.ADMIN
    )

    campaigns = CampaignUseCase(uow_factory=uow_factory, unlimited_industry_name='Other')
    route = await campaigns.create_route(zip_code='94110', name='Mission', household_count=8000)
    bakery = await campaigns.create_industry(name='Bakery')
    other = await campaigns.create_industry(name='Other')
    now = utc_now()
    campaign = await campaigns.create_campaign(
        name='Spring',
        mail_date=now + timedelta(days=30),
        print_deadline=now + timedelta(days=20),
        route_ids=[route.id],
        industry_ids=[bakery.id, other.id],
    )
    await campaigns.advance_status(campaign_id=campaign.id, status=CampaignStatus.BOOKING_OPEN)

    return Seed(
        campaign_id=campaign.id,
        route_id=route.id,
        bakery_id=bakery.id,
        other_id=other.id,
        ada_id=ada.id,
        grace_id=grace.id,
        admin_id=admin.id,
    )


@pytest.fixture
def create_booking(uow_factory: UnitOfWorkFactory, metrics: Mock) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        uow_factory=uow_factory, defaults=PricingDefaults(), metrics=metrics
    )


@pytest.fixture
def mark_paid(uow_factory: UnitOfWorkFactory, metrics: Mock) -> MarkBookingPaidUseCase:
    return MarkBookingPaidUseCase(
        uow_factory=uow_factory, metrics=metrics, loyalty_slot_threshold=3
    )


@pytest.fixture
def cancel_booking(uow_factory: UnitOfWorkFactory, metrics: Mock) -> CancelBookingUseCase:
    return CancelBookingUseCase(uow_factory=uow_factory, metrics=metrics)
