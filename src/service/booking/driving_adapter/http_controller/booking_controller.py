from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.artwork_use_case import ArtworkUseCase
from src.service.booking.app.command.begin_checkout_use_case import BeginCheckoutUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.delete_booking_use_case import DeleteBookingUseCase
from src.service.booking.app.command.request_cancellation_use_case import (
    RequestCancellationUseCase,
)
from src.service.booking.app.command.review_booking_use_case import ReviewBookingUseCase
from src.service.booking.app.command.set_price_override_use_case import SetPriceOverrideUseCase
from src.service.booking.app.query.booking_query_use_case import BookingQueryUseCase
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.user_entity import User
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    ArtworkRejectRequest,
    ArtworkSubmitRequest,
    AttachAssetsRequest,
    BookingCreateRequest,
    BookingResponse,
    CancelBookingRequest,
    CancelBookingResponse,
    CheckoutResponse,
    PriceOverrideRequest,
    RejectRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(booking: Booking) -> BookingResponse:
    return BookingResponse.model_validate(booking, from_attributes=True)


def _ensure_can_view(booking: Booking, *, user: User) -> None:
    if booking.user_id != user.id and not user.is_admin:
        raise ForbiddenError('You can only view your own bookings')


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: User = Depends(get_current_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('campaign.id', request.campaign_id)
        span.set_attribute('user.id', current_user.id)

        booking = await use_case.execute(
            user_id=current_user.id,
            campaign_id=request.campaign_id,
            route_id=request.route_id,
            industry_id=request.industry_id,
            business_name=request.business_name,
            contact_email=request.contact_email,
            quantity=request.quantity,
        )
        return _to_response(booking)


@router.get('/my_booking', response_model=List[BookingResponse])
@Logger.io
async def list_my_bookings(
    current_user: User = Depends(get_current_user),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(user_id=current_user.id)
    return [_to_response(booking) for booking in bookings]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id)
    _ensure_can_view(booking, user=current_user)
    return _to_response(booking)


@router.post('/{booking_id}/cancel')
@Logger.io
async def cancel_booking(
    booking_id: str,
    request: CancelBookingRequest = CancelBookingRequest(),
    current_user: User = Depends(get_current_user),
    use_case: RequestCancellationUseCase = Depends(RequestCancellationUseCase.depends),
) -> CancelBookingResponse:
    result = await use_case.execute(
        booking_id=booking_id, acting_user_id=current_user.id, waive_fee=request.waive_fee
    )
    return CancelBookingResponse(
        booking=_to_response(result.booking), cancelled_now=result.cancelled_now
    )


@router.post('/{booking_id}/checkout')
@Logger.io
async def begin_checkout(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    query_use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
    use_case: BeginCheckoutUseCase = Depends(BeginCheckoutUseCase.depends),
) -> CheckoutResponse:
    _ensure_can_view(await query_use_case.get_booking(booking_id=booking_id), user=current_user)
    checkout = await use_case.execute(booking_id=booking_id)
    return CheckoutResponse(booking=_to_response(checkout.booking), amount_due=checkout.amount_due)


@router.post('/{booking_id}/artwork')
@Logger.io
async def submit_artwork(
    booking_id: str,
    request: ArtworkSubmitRequest,
    current_user: User = Depends(get_current_user),
    use_case: ArtworkUseCase = Depends(ArtworkUseCase.depends),
) -> BookingResponse:
    booking = await use_case.submit_artwork(
        booking_id=booking_id, user_id=current_user.id, file_path=request.file_path
    )
    return _to_response(booking)


@router.post('/{booking_id}/assets')
@Logger.io
async def attach_assets(
    booking_id: str,
    request: AttachAssetsRequest,
    current_user: User = Depends(get_current_user),
    use_case: ArtworkUseCase = Depends(ArtworkUseCase.depends),
) -> BookingResponse:
    booking = await use_case.attach_assets(
        booking_id=booking_id,
        user_id=current_user.id,
        logo_file_path=request.logo_file_path,
        optional_image_path=request.optional_image_path,
    )
    return _to_response(booking)


# ===== Admin =====


@router.post('/{booking_id}/approve')
@Logger.io
async def approve_booking(
    booking_id: str,
    _admin: User = Depends(require_admin),
    use_case: ReviewBookingUseCase = Depends(ReviewBookingUseCase.depends),
) -> BookingResponse:
    return _to_response(await use_case.approve(booking_id=booking_id))


@router.post('/{booking_id}/reject')
@Logger.io
async def reject_booking(
    booking_id: str,
    request: RejectRequest,
    _admin: User = Depends(require_admin),
    use_case: ReviewBookingUseCase = Depends(ReviewBookingUseCase.depends),
) -> BookingResponse:
    return _to_response(await use_case.reject(booking_id=booking_id, note=request.note))


@router.post('/{booking_id}/artwork/approve')
@Logger.io
async def approve_artwork(
    booking_id: str,
    _admin: User = Depends(require_admin),
    use_case: ArtworkUseCase = Depends(ArtworkUseCase.depends),
) -> BookingResponse:
    return _to_response(await use_case.approve_artwork(booking_id=booking_id))


@router.post('/{booking_id}/artwork/reject')
@Logger.io
async def reject_artwork(
    booking_id: str,
    request: ArtworkRejectRequest,
    _admin: User = Depends(require_admin),
    use_case: ArtworkUseCase = Depends(ArtworkUseCase.depends),
) -> BookingResponse:
    return _to_response(
        await use_case.reject_artwork(booking_id=booking_id, reason=request.reason)
    )


@router.put('/{booking_id}/price_override')
@Logger.io
async def set_price_override(
    booking_id: str,
    request: PriceOverrideRequest,
    _admin: User = Depends(require_admin),
    use_case: SetPriceOverrideUseCase = Depends(SetPriceOverrideUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        booking_id=booking_id, price_override=request.price_override, note=request.note
    )
    return _to_response(booking)


@router.delete('/{booking_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_booking(
    booking_id: str,
    _admin: User = Depends(require_admin),
    use_case: DeleteBookingUseCase = Depends(DeleteBookingUseCase.depends),
) -> None:
    await use_case.execute(booking_id=booking_id)
