from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.campaign_use_case import CampaignUseCase
from src.service.booking.app.query.booking_query_use_case import BookingQueryUseCase
from src.service.booking.app.query.get_slot_grid_use_case import GetSlotGridUseCase
from src.service.booking.app.query.quote_price_use_case import QuotePriceUseCase
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.domain.enum.campaign_status import CampaignStatus
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingResponse,
)
from src.service.booking.driving_adapter.http_controller.schema.campaign_schema import (
    CampaignCreateRequest,
    CampaignOfferingRequest,
    CampaignResponse,
    CampaignScheduleRequest,
    CampaignStatusRequest,
    IndustryCreateRequest,
    IndustryResponse,
    RouteCreateRequest,
    RouteResponse,
    SlotGridResponse,
)
from src.service.booking.driving_adapter.http_controller.schema.pricing_schema import (
    PriceQuoteResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_campaign(
    request: CampaignCreateRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> CampaignResponse:
    campaign = await use_case.create_campaign(
        name=request.name,
        mail_date=request.mail_date,
        print_deadline=request.print_deadline,
        route_ids=request.route_ids,
        industry_ids=request.industry_ids,
        base_slot_price=request.base_slot_price,
        additional_slot_price=request.additional_slot_price,
    )
    return CampaignResponse.model_validate(campaign, from_attributes=True)


@router.patch('/{campaign_id}/status')
@Logger.io
async def advance_campaign_status(
    campaign_id: str,
    request: CampaignStatusRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> CampaignResponse:
    try:
        target = CampaignStatus(request.status)
    except ValueError as e:
        raise InvalidArgumentError(f'Unknown campaign status: {request.status}') from e
    campaign = await use_case.advance_status(campaign_id=campaign_id, status=target)
    return CampaignResponse.model_validate(campaign, from_attributes=True)


@router.put('/{campaign_id}/offering')
@Logger.io
async def update_offering(
    campaign_id: str,
    request: CampaignOfferingRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> CampaignResponse:
    campaign = await use_case.update_offering(
        campaign_id=campaign_id, route_ids=request.route_ids, industry_ids=request.industry_ids
    )
    return CampaignResponse.model_validate(campaign, from_attributes=True)


@router.patch('/{campaign_id}')
@Logger.io
async def update_schedule(
    campaign_id: str,
    request: CampaignScheduleRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> CampaignResponse:
    campaign = await use_case.update_schedule(campaign_id=campaign_id, **request.model_dump())
    return CampaignResponse.model_validate(campaign, from_attributes=True)


@router.get('/{campaign_id}/slots')
@Logger.io
async def get_slot_grid(
    campaign_id: str,
    _user: User = Depends(get_current_user),
    use_case: GetSlotGridUseCase = Depends(GetSlotGridUseCase.depends),
) -> SlotGridResponse:
    grid = await use_case.execute(campaign_id=campaign_id)
    return SlotGridResponse.model_validate(grid, from_attributes=True)


@router.get('/{campaign_id}/quote')
@Logger.io
async def quote_price(
    campaign_id: str,
    quantity: int = Query(default=1),
    current_user: User = Depends(get_current_user),
    use_case: QuotePriceUseCase = Depends(QuotePriceUseCase.depends),
) -> PriceQuoteResponse:
    quote = await use_case.execute(
        campaign_id=campaign_id, user_id=current_user.id, quantity=quantity
    )
    return PriceQuoteResponse.model_validate(quote, from_attributes=True)


@router.get('/{campaign_id}/bookings', response_model=List[BookingResponse])
@Logger.io
async def list_campaign_bookings(
    campaign_id: str,
    _admin: User = Depends(require_admin),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_campaign_bookings(campaign_id=campaign_id)
    return [BookingResponse.model_validate(b, from_attributes=True) for b in bookings]


@router.post('/route', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_route(
    request: RouteCreateRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> RouteResponse:
    route = await use_case.create_route(
        zip_code=request.zip_code, name=request.name, household_count=request.household_count
    )
    return RouteResponse.model_validate(route, from_attributes=True)


@router.post('/industry', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_industry(
    request: IndustryCreateRequest,
    _admin: User = Depends(require_admin),
    use_case: CampaignUseCase = Depends(CampaignUseCase.depends),
) -> IndustryResponse:
    industry = await use_case.create_industry(name=request.name, description=request.description)
    return IndustryResponse.model_validate(industry, from_attributes=True)
