"""
Logger.io: call tracing decorator for use cases, repositories and controllers.

In DEBUG every decorated call logs its (masked) arguments and return value,
indented by nesting depth. Errors are logged once where they first surface:
CustomBaseError at ERROR without traceback, anything else with traceback.
"""

from collections.abc import Awaitable
from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, call_depth_var, custom_logger
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    fetch_layer_depth,
    get_chain_start_time,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

# Frames between the decorated function's caller and the log call
_WRAPPER_DEPTH = 2
_LOGGED_MARKER = '_has_logged'


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate: bool = False
    ) -> None:
        self._logger = custom_logger
        self.reraise = reraise
        self.truncate = truncate
        self.extra: dict[str, Any] = {}

    def _debug(self, message: str) -> None:
        self._logger.bind(**self.extra).opt(depth=_WRAPPER_DEPTH + 1).debug(
            f'{fetch_layer_depth()}{message}'
        )

    def _on_enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._debug(f'args: {self.mask(args)}, kwargs: {self.mask(kwargs)}')

    def _on_return(self, value: Any) -> None:
        if settings.DEBUG:
            self._debug(f'return: {self.mask(value)}')

    def _on_error(self, e: Exception) -> None:
        if getattr(e, _LOGGED_MARKER, False):
            return
        setattr(e, _LOGGED_MARKER, True)
        log = self._logger.bind(**self.extra).opt(depth=_WRAPPER_DEPTH + 1)
        if isinstance(e, CustomBaseError):
            log.error(f'{type(e).__name__}: {e}')
        else:
            log.exception(f'{type(e).__name__}: {e}')

    def mask(self, data: Any) -> Any:
        if isinstance(data, dict):
            masked: Any = {
                key: self.mask(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            masked = type(data)(self.mask(item) for item in data)
        else:
            masked = mask_sensitive(data)
        return truncate_content(masked) if self.truncate else masked

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        # Tracebacks attribute wrapper frames to loguru, which it then elides
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    self._on_enter(args, kwargs)
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    value = await cast(Awaitable[Any], func(*args, **kwargs))
                except Exception as e:
                    self._on_error(e)
                    if self.reraise:
                        raise
                    return None
                else:
                    self._on_return(value)
                    return value
                finally:
                    reset_call_depth()

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                self._on_enter(args, kwargs)
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                value = func(*args, **kwargs)
            except Exception as e:
                self._on_error(e)
                if self.reraise:
                    raise
                return None
            else:
                self._on_return(value)
                return value
            finally:
                reset_call_depth()

        return cast(_F, self._hide_from_traceback(sync_wrapper))


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(custom_logger, reraise=reraise, truncate=truncate)
        return decorator(func) if func else decorator
