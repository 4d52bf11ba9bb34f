from typing import Any, Mapping

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import (
    ApprovalStatus,
    ArtworkStatus,
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.driven_adapter.model.booking_model import BookingModel


booking_table = BookingModel.__table__


def booking_row_to_entity(row: Mapping[str, Any]) -> Booking:
    values = dict(row)
    values['status'] = BookingStatus(values['status'])
    values['payment_status'] = PaymentStatus(values['payment_status'])
    values['approval_status'] = ApprovalStatus(values['approval_status'])
    values['artwork_status'] = ArtworkStatus(values['artwork_status'])
    if values['refund_status'] is not None:
        values['refund_status'] = RefundStatus(values['refund_status'])
    return Booking(**values)


def booking_entity_to_values(booking: Booking) -> dict[str, Any]:
    return attrs.asdict(booking, recurse=False)
