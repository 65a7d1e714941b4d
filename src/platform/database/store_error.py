"""
Classification of PostgreSQL failures into retry decisions.

asyncpg errors reach us wrapped twice: SQLAlchemy raises a `DBAPIError`
whose `.orig` is the adapted DBAPI error carrying `sqlstate`, and whose
`__cause__` chain ends at the asyncpg exception.
"""

from enum import StrEnum
from typing import Optional

from sqlalchemy import exc as sa_exc

from src.platform.exception.exceptions import BusyError, CustomBaseError, StoreFailureError


class StoreErrorKind(StrEnum):
    BUSY = 'busy'
    CONNECTION_LOST = 'connection_lost'
    FATAL = 'fatal'


# lock_not_available, query_canceled (statement/lock timeout), deadlock_detected, serialization_failure
BUSY_SQLSTATES = frozenset({'55P03', '57014', '40P01', '40001'})
CONNECTION_SQLSTATE_CLASS = '08'


def extract_sqlstate(exc: BaseException) -> Optional[str]:
    candidates: list[Optional[BaseException]] = [exc]
    if isinstance(exc, sa_exc.DBAPIError):
        candidates.append(exc.orig)  # type: ignore[arg-type]
    candidates.append(exc.__cause__)

    for candidate in candidates:
        if candidate is None:
            continue
        code = getattr(candidate, 'sqlstate', None) or getattr(candidate, 'pgcode', None)
        if isinstance(code, str) and code:
            return code
        cause = candidate.__cause__
        if cause is not None:
            code = getattr(cause, 'sqlstate', None)
            if isinstance(code, str) and code:
                return code
    return None


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    if isinstance(exc, sa_exc.TimeoutError):
        # Connection pool exhausted
        return StoreErrorKind.BUSY

    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return StoreErrorKind.CONNECTION_LOST

    sqlstate = extract_sqlstate(exc)
    if sqlstate in BUSY_SQLSTATES:
        return StoreErrorKind.BUSY
    if sqlstate is not None and sqlstate.startswith(CONNECTION_SQLSTATE_CLASS):
        return StoreErrorKind.CONNECTION_LOST

    if sqlstate is None and isinstance(exc, sa_exc.InterfaceError | ConnectionError):
        return StoreErrorKind.CONNECTION_LOST

    return StoreErrorKind.FATAL


def to_service_error(exc: BaseException) -> CustomBaseError:
    """Final translation once no retry is left"""
    if classify_store_error(exc) is StoreErrorKind.BUSY:
        return BusyError()
    return StoreFailureError()
