import json
from unittest.mock import MagicMock

from fastapi.exceptions import RequestValidationError
import pytest

from src.platform.exception.exception_handlers import (
    custom_error_handler,
    general_500_exception_handler,
    validation_error_handler,
    value_error_handler,
)
from src.platform.exception.exceptions import (
    BusyError,
    ForbiddenError,
    InsufficientAvailabilityError,
    StoreFailureError,
)


pytestmark = pytest.mark.unit


def _body(response) -> dict:
    return json.loads(response.body)


class TestCustomErrorHandler:
    async def test_extra_fields_are_merged_into_body(self):
        error = InsufficientAvailabilityError(event_id=1, requested=5, remaining=2)

        response = await custom_error_handler(MagicMock(), error)

        assert response.status_code == 409
        assert _body(response) == {
            'detail': 'Only 2 tickets available',
            'remaining': 2,
            'requested': 5,
        }

    async def test_busy_sets_retry_after(self):
        response = await custom_error_handler(MagicMock(), BusyError())

        assert response.status_code == 503
        assert response.headers['retry-after'] == '1'
        assert _body(response) == {'detail': 'Event is busy, please retry', 'retryable': True}

    async def test_plain_error_has_detail_only(self):
        response = await custom_error_handler(MagicMock(), ForbiddenError('Nope'))

        assert response.status_code == 403
        assert _body(response) == {'detail': 'Nope'}
        assert 'retry-after' not in response.headers

    async def test_store_failure_hides_internals(self):
        response = await custom_error_handler(MagicMock(), StoreFailureError())

        assert response.status_code == 500
        assert _body(response) == {'detail': 'Database error'}


class TestFallbackHandlers:
    async def test_value_error_is_bad_request(self):
        response = await value_error_handler(MagicMock(), ValueError('Event title cannot be empty'))

        assert response.status_code == 400
        assert _body(response) == {'detail': 'Event title cannot be empty'}

    async def test_validation_error_is_bad_request(self):
        error = RequestValidationError(
            [{'type': 'int_type', 'loc': ('body', 'quantity'), 'msg': 'bad', 'ctx': {'e': object()}}]
        )

        response = await validation_error_handler(MagicMock(), error)

        assert response.status_code == 400
        assert _body(response)['detail'][0]['loc'] == ['body', 'quantity']
        assert 'ctx' not in _body(response)['detail'][0]

    async def test_unexpected_error_is_opaque(self):
        response = await general_500_exception_handler(MagicMock(), RuntimeError('secret'))

        assert response.status_code == 500
        assert _body(response) == {'detail': 'Internal server error'}
