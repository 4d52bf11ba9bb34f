"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from datetime import timedelta

from dependency_injector import containers, providers

from src.platform.clock import utc_now
from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.domain.admin_notification import NotificationWindows
from src.service.booking.domain.pricing.price_quote import PricingDefaults
from src.service.booking.domain.refund_policy import RefundPolicy
from src.service.booking.driven_adapter.blob.local_blob_store_impl import LocalBlobStore


def _pricing_defaults(settings: Settings) -> PricingDefaults:
    return PricingDefaults(
        first_slot_price=settings.DEFAULT_FIRST_SLOT_PRICE,
        additional_slot_price=settings.DEFAULT_ADDITIONAL_SLOT_PRICE,
        loyalty_discount_amount=settings.LOYALTY_DISCOUNT_AMOUNT,
        max_quantity=settings.MAX_SLOTS_PER_BOOKING,
    )


def _notification_windows(settings: Settings) -> NotificationWindows:
    return NotificationWindows(
        new_booking=timedelta(hours=settings.NEW_BOOKING_NOTIFICATION_HOURS),
        cancelled_booking=timedelta(days=settings.CANCELLED_BOOKING_NOTIFICATION_DAYS),
    )


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine + session maker)
    database = providers.Singleton(Database)

    # One unit of work per lifecycle operation; use cases receive the provider itself
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_maker=database.provided.session_maker
    )

    # Infrastructure services
    blob_store = providers.Singleton(LocalBlobStore, root=config_service.provided.UPLOAD_DIR)
    clock = providers.Object(utc_now)
    booking_metrics = providers.Object(metrics)

    # Business policies built from settings
    pricing_defaults = providers.Singleton(_pricing_defaults, settings=config_service)
    refund_policy = providers.Singleton(
        RefundPolicy,
        cutoff_days=config_service.provided.REFUND_CUTOFF_DAYS,
        processing_fee_percent=config_service.provided.REFUND_PROCESSING_FEE_PERCENT,
    )
    notification_windows = providers.Singleton(_notification_windows, settings=config_service)


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


def cleanup() -> None:
    container.reset_singletons()
