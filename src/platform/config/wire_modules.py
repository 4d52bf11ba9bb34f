"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import (
    artwork_use_case,
    begin_checkout_use_case,
    campaign_use_case,
    cancel_booking_use_case,
    create_booking_use_case,
    delete_booking_use_case,
    dismiss_notification_use_case,
    mark_booking_paid_use_case,
    mark_payment_failed_use_case,
    mark_refund_outcome_use_case,
    pricing_rule_use_case,
    request_cancellation_use_case,
    review_booking_use_case,
    set_price_override_use_case,
    user_use_case,
)
from src.service.booking.app.query import (
    booking_query_use_case,
    get_slot_grid_use_case,
    list_admin_notifications_use_case,
    quote_price_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    # Booking lifecycle
    create_booking_use_case,
    begin_checkout_use_case,
    mark_booking_paid_use_case,
    mark_payment_failed_use_case,
    mark_refund_outcome_use_case,
    review_booking_use_case,
    artwork_use_case,
    cancel_booking_use_case,
    request_cancellation_use_case,
    set_price_override_use_case,
    delete_booking_use_case,
    # Catalogue and accounts
    campaign_use_case,
    pricing_rule_use_case,
    user_use_case,
    # Admin notifications
    dismiss_notification_use_case,
    list_admin_notifications_use_case,
    # Queries
    booking_query_use_case,
    get_slot_grid_use_case,
    quote_price_use_case,
]
