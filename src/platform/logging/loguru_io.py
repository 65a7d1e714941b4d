"""
`Logger.io` - input/output logging for use cases, repositories and controllers

    @Logger.io
    async def purchase(self, *, event_id: int, quantity: int) -> PurchaseResult: ...

Arguments and return values are logged at DEBUG with sensitive keys masked.
An exception is logged once, at the innermost decorated frame it crosses:
business errors (CustomBaseError) as a one-line error, anything else with
its traceback.
"""

from collections.abc import Awaitable, Generator, Iterator
from contextlib import contextmanager
from functools import wraps
from inspect import iscoroutinefunction, isgeneratorfunction
import types
from typing import TYPE_CHECKING, Any, Callable, Optional, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.generator_wrapper import GeneratorWrapper
from src.platform.logging.loguru_io_config import (
    ExtraField,
    GeneratorMethod,
    call_depth_var,
    custom_logger,
)
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    handle_yield,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)

_F = TypeVar('_F', bound=Callable[..., Any])


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        self.depth = 2  # wrapper frame + its caller

    def _emit_debug(self, message: str) -> None:
        self._custom_logger.bind(**self.extra).opt(depth=self.depth).debug(message)

    def log_args_kwargs_content(
        self, *args: Any, yield_method: Optional[GeneratorMethod] = None, **kwargs: Any
    ) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        # Masking walks every argument; skip it when DEBUG lines are dropped anyway
        if settings.DEBUG:
            self._emit_debug(
                f'{handle_yield(yield_method)}args: {self.mask_sensitive(args)}, '
                f'kwargs: {self.mask_sensitive(kwargs)}'
            )

    def log_return_content(
        self, return_value: Any, yield_method: Optional[GeneratorMethod] = None
    ) -> None:
        if settings.DEBUG:
            self._emit_debug(
                f'{handle_yield(yield_method)}return: {self.mask_sensitive(return_value)}'
            )

    def log_exception(self, exc: Exception) -> None:
        if getattr(exc, '_has_logged', False):
            return
        exc._has_logged = True  # type: ignore[attr-defined]

        bound = self._custom_logger.bind(**self.extra).opt(depth=self.depth + 2)
        if isinstance(exc, CustomBaseError):
            bound.error(f'{type(exc).__name__}: {exc}')
        else:
            bound.exception(f'{type(exc).__name__}: {exc}')

    def mask_sensitive(self, data: Any) -> Any:
        if isinstance(data, dict):
            masked: Any = {
                key: self.mask_sensitive(should_mask_keyword(key, value))
                for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            masked = type(data)(self.mask_sensitive(item) for item in data)
        else:
            masked = mask_sensitive(data)
        return truncate_content(masked) if self.truncate_content else masked

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            self.log_exception(e)
            if self.reraise:
                raise
        finally:
            reset_call_depth()

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        # Loguru's `backtrace` skips frames whose file is loguru's own
        loguru_file = cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        func.__code__ = func.__code__.replace(co_filename=loguru_file)  # type: ignore[attr-defined]
        return func

    def _wrap_async(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            self.log_args_kwargs_content(*args, **kwargs)
            with self._guard():
                call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                result = await cast(Awaitable[Any], func(*call_args, **call_kwargs))
                self.log_return_content(result)
                return result
            return None

        return async_wrapper

    def _wrap_generator(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def generator_wrapper(*args: Any, **kwargs: Any) -> GeneratorWrapper | None:
            self.log_args_kwargs_content(*args, **kwargs)
            with self._guard():
                gen_obj = cast(Generator[Any, Any, Any], func(*args, **kwargs))
                self.log_return_content(gen_obj)
                return GeneratorWrapper(gen_obj, self)
            return None

        return generator_wrapper

    def _wrap_sync(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            self.log_args_kwargs_content(*args, **kwargs)
            with self._guard():
                call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                result = func(*call_args, **call_kwargs)
                self.log_return_content(result)
                return result
            return None

        return sync_wrapper

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)
        if iscoroutinefunction(func):
            wrapper = self._wrap_async(func)
        elif isgeneratorfunction(func):
            wrapper = self._wrap_generator(func)
        else:
            wrapper = self._wrap_sync(func)
        return cast(_F, self._hide_from_traceback(wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
