"""
HTTP mapping of the error taxonomy.

Every CustomBaseError carries its own status code and becomes
{"detail": message}; request validation failures are 400 with pydantic's
error list; anything unexpected is a bare 500.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError, UpstreamFailureError
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

# Seconds a client should wait before retrying an upstream failure
UPSTREAM_RETRY_AFTER = 5


def _detail(status_code: int, detail: Any, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': detail}, headers=headers)


async def booking_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, CustomBaseError):
        return await unhandled_error_handler(request, exc)
    headers = (
        {'Retry-After': str(UPSTREAM_RETRY_AFTER)}
        if isinstance(exc, UpstreamFailureError)
        else None
    )
    return _detail(exc.status_code, exc.message, headers)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    return _detail(status.HTTP_400_BAD_REQUEST, errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not getattr(exc, '_has_logged', False):
        Logger.base.opt(exception=exc).error(
            f'💥 [HTTP] Unhandled {type(exc).__name__} on {request.method} {request.url.path}'
        )
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: booking_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
