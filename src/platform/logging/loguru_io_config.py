"""
Loguru setup for the booking service.

Importing this module configures the process-wide logger once:
- stdout sink, DEBUG level when settings.DEBUG
- hourly rotating file sink under LOG_DIR (TEST_LOG_DIR in tests), DEBUG only
- stdlib logging (uvicorn, SQLAlchemy, asyncio) routed into loguru
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Optional

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

# Argument names whose values never reach the logs
SENSITIVE_KEYWORDS = {
    'password',
    'contact_email',
    'payment_ref',
}
DEPTH_LINE = '│ '
MAX_CONTENT_LENGTH = 500

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# uvicorn access line: '127.0.0.1:51234 - "POST /api/booking HTTP/1.1" 201'
_ACCESS_LOG_STATUS = re.compile(r' - "[A-Z]+ \S+ HTTP/[\d.]+" (\d{3})')

# (logger name prefix, level at or below which records are dropped)
_NOISY_LOGGERS = (
    ('asyncio', logging.DEBUG),
    ('aiosqlite', logging.DEBUG),
)


def access_log_level(message: str) -> Optional[str]:
    """Level for a uvicorn access line by response status, None for other messages"""
    match = _ACCESS_LOG_STATUS.search(message)
    if match is None:
        return None
    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    return 'SUCCESS'


def _bind_defaults() -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records to loguru, keeping the original caller"""

    def __init__(self) -> None:
        super().__init__()
        self._logger = _bind_defaults()

    def emit(self, record: logging.LogRecord) -> None:
        for prefix, max_dropped in _NOISY_LOGGERS:
            if record.name.startswith(prefix) and record.levelno <= max_dropped:
                return

        message = record.getMessage()
        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self._logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _log_file_path() -> str:
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else 'booking_'
    return f'{LOG_DIR}/{prefix}{hour}.log'


def _configure() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = _bind_defaults()
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)
    if settings.DEBUG:
        bound.add(
            _log_file_path(),
            format=io_log_format,
            level=level,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return bound


custom_logger = _configure()
