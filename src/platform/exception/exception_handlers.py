"""
HTTP rendering of errors.

Every error body is `{"detail": <message>, **extra}`; `extra` carries the
machine-readable fields a client acts on (`remaining`, `requested`,
`retryable`, `sold`).
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import BusyError, CustomBaseError
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

RETRY_AFTER_SECONDS = 1


def _error_response(
    status_code: int, detail: Any, *, extra: dict[str, Any] | None = None, headers=None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={'detail': detail, **(extra or {})}, headers=headers
    )


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, CustomBaseError):
        return await general_500_exception_handler(request, exc)

    headers = {'Retry-After': str(RETRY_AFTER_SECONDS)} if isinstance(exc, BusyError) else None
    return _error_response(exc.status_code, exc.message, extra=exc.extra, headers=headers)


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Entity validators raise ValueError for malformed input
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


def jsonable_errors(error: RequestValidationError) -> list[dict[str, Any]]:
    # `ctx` may hold the raw exception object
    return [{k: v for k, v in err.items() if k != 'ctx'} for err in error.errors()]


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = jsonable_errors(exc) if isinstance(exc, RequestValidationError) else []
    return _error_response(status.HTTP_400_BAD_REQUEST, errors)


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.opt(exception=exc).error(
        f'Unhandled {type(exc).__name__} on {request.method} {request.url.path}'
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
