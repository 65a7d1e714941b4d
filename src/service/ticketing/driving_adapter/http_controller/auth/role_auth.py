"""Route dependencies that admit a single role"""

from typing import Awaitable, Callable

from fastapi import Depends
from opentelemetry import trace

from src.platform.exception.exceptions import ForbiddenError
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
from src.service.ticketing.driving_adapter.http_controller.user_controller import (
    get_current_user,
)


tracer = trace.get_tracer(__name__)


def role_required(role: UserRole) -> Callable[..., Awaitable[UserEntity]]:
    denied = f'Only {role.value}s can perform this action'

    async def dependency(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
        with tracer.start_as_current_span(
            f'auth.require_{role.value}',
            attributes={'user.id': current_user.id or 0, 'user.role': current_user.role.value},
        ):
            if current_user.role is not role:
                raise ForbiddenError(denied)
            return current_user

    dependency.__name__ = f'require_{role.value}'
    return dependency


require_buyer = role_required(UserRole.BUYER)
require_organizer = role_required(UserRole.ORGANIZER)
