"""
Admin notifications are a read-only projection over booking state.

Nothing is stored except which (booking, type) pairs an admin dismissed.
"""

from datetime import datetime, timedelta
from enum import StrEnum
from typing import AbstractSet, Iterable

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enum import ArtworkStatus, BookingStatus


class NotificationType(StrEnum):
    NEW_BOOKING = 'new_booking'
    ARTWORK_REVIEW = 'artwork_review'
    CANCELLED_BOOKING = 'cancelled_booking'


@attrs.define(frozen=True)
class AdminNotification:
    id: str
    type: NotificationType
    booking_id: str
    campaign_id: str
    business_name: str
    message: str
    occurred_at: datetime | None


@attrs.define(frozen=True)
class NotificationWindows:
    new_booking: timedelta = timedelta(hours=24)
    cancelled_booking: timedelta = timedelta(days=7)


def _notification(
    booking: Booking, notification_type: NotificationType, message: str, at: datetime | None
) -> AdminNotification:
    return AdminNotification(
        id=f'{notification_type}_{booking.id}',
        type=notification_type,
        booking_id=booking.id,
        campaign_id=booking.campaign_id,
        business_name=booking.business_name,
        message=message,
        occurred_at=at,
    )


def derive_admin_notifications(
    *,
    bookings: Iterable[Booking],
    dismissed: AbstractSet[tuple[str, NotificationType]],
    now: datetime,
    windows: NotificationWindows = NotificationWindows(),
    notification_type: NotificationType | None = None,
) -> list[AdminNotification]:
    """
    Args:
        dismissed: (booking_id, type) pairs the admin already dismissed

    Returns:
        Notifications, newest first
    """
    new_since = now - windows.new_booking
    cancelled_since = now - windows.cancelled_booking

    notifications: list[AdminNotification] = []
    for booking in bookings:
        if (
            booking.status == BookingStatus.CONFIRMED
            and booking.created_at is not None
            and booking.created_at > new_since
        ):
            notifications.append(
                _notification(
                    booking,
                    NotificationType.NEW_BOOKING,
                    f'New booking from {booking.business_name}',
                    booking.created_at,
                )
            )
        if booking.is_active and booking.artwork_status == ArtworkStatus.UNDER_REVIEW:
            notifications.append(
                _notification(
                    booking,
                    NotificationType.ARTWORK_REVIEW,
                    f'Artwork from {booking.business_name} is waiting for review',
                    booking.artwork_uploaded_at,
                )
            )
        if (
            booking.status == BookingStatus.CANCELLED
            and booking.cancellation_date is not None
            and booking.cancellation_date > cancelled_since
        ):
            notifications.append(
                _notification(
                    booking,
                    NotificationType.CANCELLED_BOOKING,
                    f'Booking from {booking.business_name} was cancelled',
                    booking.cancellation_date,
                )
            )

    visible = [
        notification
        for notification in notifications
        if (notification.booking_id, notification.type) not in dismissed
        and (notification_type is None or notification.type == notification_type)
    ]
    visible.sort(key=lambda n: (n.occurred_at or now), reverse=True)
    return visible
