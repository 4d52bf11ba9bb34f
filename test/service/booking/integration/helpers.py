"""Seed record and booking shortcut shared by the integration tests"""

import attrs

from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.domain.entity.booking_entity import Booking


@attrs.define
class Seed:
    campaign_id: str
    route_id: str
    bakery_id: str
    other_id: str
    ada_id: str
    grace_id: str
    admin_id: str


async def book(
    create_booking: CreateBookingUseCase,
    seed: Seed,
    *,
    user_id: str,
    industry_id: str | None = None,
    quantity: int = 1,
) -> Booking:
    return await create_booking.execute(
        user_id=user_id,
        campaign_id=seed.campaign_id,
        route_id=seed.route_id,
        industry_id=industry_id or seed.bakery_id,
        business_name='Sunrise Bakery',
        contact_email='owner@sunrise.example',
        quantity=quantity,
    )
