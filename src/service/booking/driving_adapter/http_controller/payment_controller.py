"""Payment gateway callbacks. Signature verification happens at the gateway edge."""

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.mark_booking_paid_use_case import MarkBookingPaidUseCase
from src.service.booking.app.command.mark_payment_failed_use_case import MarkPaymentFailedUseCase
from src.service.booking.app.command.mark_refund_outcome_use_case import MarkRefundOutcomeUseCase
from src.service.booking.domain.enum.booking_enum import RefundStatus
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingResponse,
    PaymentSucceededRequest,
    RefundOutcomeRequest,
)


router = APIRouter()


@router.post('/{booking_id}/succeeded')
@Logger.io
async def payment_succeeded(
    booking_id: str,
    request: PaymentSucceededRequest,
    use_case: MarkBookingPaidUseCase = Depends(MarkBookingPaidUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        booking_id=booking_id, amount_paid=request.amount_paid, payment_ref=request.payment_ref
    )
    return BookingResponse.model_validate(booking, from_attributes=True)


@router.post('/{booking_id}/failed')
@Logger.io
async def payment_failed(
    booking_id: str,
    use_case: MarkPaymentFailedUseCase = Depends(MarkPaymentFailedUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(booking_id=booking_id)
    return BookingResponse.model_validate(booking, from_attributes=True)


@router.post('/{booking_id}/refund')
@Logger.io
async def refund_outcome(
    booking_id: str,
    request: RefundOutcomeRequest,
    use_case: MarkRefundOutcomeUseCase = Depends(MarkRefundOutcomeUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        booking_id=booking_id, refund_status=RefundStatus(request.refund_status)
    )
    return BookingResponse.model_validate(booking, from_attributes=True)
