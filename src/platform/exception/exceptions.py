from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(
        self, message: str, status_code: int, extra: dict[str, Any] | None = None
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class InvalidRequestError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message, 409, extra)


class InsufficientAvailabilityError(ConflictError):
    """Business rejection: the event cannot cover the requested quantity."""

    def __init__(self, *, event_id: int, requested: int, remaining: int) -> None:
        self.event_id = event_id
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f'Only {remaining} tickets available',
            extra={'remaining': remaining, 'requested': requested},
        )


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class BusyError(CustomBaseError):
    """The store could not grant the lock in time; the caller may retry."""

    def __init__(self, message: str = 'Event is busy, please retry') -> None:
        super().__init__(message, 503, {'retryable': True})


class StoreFailureError(CustomBaseError):
    def __init__(self, message: str = 'Database error') -> None:
        super().__init__(message, 500)
