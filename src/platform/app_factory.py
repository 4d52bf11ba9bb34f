"""
FastAPI app factory: routers, CORS, error mapping, health and metrics.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.booking.driving_adapter.http_controller.campaign_controller import (
    router as campaign_router,
)
from src.service.booking.driving_adapter.http_controller.notification_controller import (
    router as notification_router,
)
from src.service.booking.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.booking.driving_adapter.http_controller.pricing_controller import (
    router as pricing_router,
)
from src.service.booking.driving_adapter.http_controller.user_controller import (
    router as user_router,
)


_ROUTES = (
    (user_router, '/api/user', 'user'),
    (campaign_router, '/api/campaign', 'campaign'),
    (pricing_router, '/api/pricing', 'pricing'),
    (booking_router, '/api/booking', 'booking'),
    (payment_router, '/api/payment', 'payment'),
    (notification_router, '/api/admin/notification', 'admin-notification'),
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]] | None = None,
    title_suffix: str = '',
    description: str = 'Mailer slot booking',
    service_name: str = 'mailer-booking',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    for router, prefix, tag in _ROUTES:
        app.include_router(router, prefix=prefix, tags=[tag])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME, 'version': settings.VERSION}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
