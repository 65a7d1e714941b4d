"""
Loguru sinks and shared state for the `Logger.io` decorator.

Everything goes to stdout; in DEBUG mode an hourly rotated file under
LOG_DIR (or TEST_LOG_DIR when running tests) gets the same lines.
Standard `logging` records (uvicorn, sqlalchemy, alembic) are routed into
loguru so there is a single format.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Keys whose values never reach a log line
SENSITIVE_KEYWORDS = frozenset({'password', 'hashed_password', 'token', 'secret_key'})
MAX_CONTENT_LENGTH = 1000

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


class GeneratorMethod(StrEnum):
    NEXT = 'next'
    SEND = 'send'
    THROW = 'throw'


def _default_extra() -> dict[str, Any]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


# (lower bound, level) checked top-down
_HTTP_STATUS_LEVELS = ((500, 'CRITICAL'), (400, 'ERROR'), (300, 'WARNING'), (200, 'SUCCESS'))


def _parse_http_status_level(message: str) -> str | None:
    """
    Level for a uvicorn access line, picked from its status code.

    '127.0.0.1:51234 - "POST /api/events/1/purchase HTTP/1.1" 201'
    """
    if ' HTTP/' not in message or '"' not in message:
        return None

    tail = message.rsplit('"', 1)[-1].replace('-', ' ').split()
    if not tail or not tail[0].isdigit():
        return None

    status_code = int(tail[0])
    for lower_bound, level in _HTTP_STATUS_LEVELS:
        if status_code >= lower_bound:
            return level
    return 'INFO'


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru"""

    def __init__(self) -> None:
        super().__init__()
        self._logger: 'LoguruLogger | None' = None

    @property
    def bound_logger(self) -> 'LoguruLogger':
        if self._logger is None:
            self._logger = loguru_logger.bind(**_default_extra())
        return self._logger

    def _level_for(self, record: logging.LogRecord, message: str) -> str | int:
        if record.name == 'uvicorn.access' and (level := _parse_http_status_level(message)):
            return level
        try:
            return loguru_logger.level(record.levelname).name
        except ValueError:
            return record.levelno

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and message.startswith('Using selector:'):
            return

        # Walk out of the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self.bound_logger.opt(depth=depth, exception=record.exc_info).log(
            self._level_for(record, message), message
        )


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
    test_log_dir = os.environ.get('TEST_LOG_DIR')
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    if test_log_dir:
        return f'{test_log_dir}/test_{hour}.log'
    return f'{LOG_DIR}/{hour}.log'


def _configure() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = loguru_logger.bind(**_default_extra())
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
