"""
Organizer edits run under the same row lock as purchases, so a capacity
change is checked against `sold` as it stands once in-flight purchases on
the event have committed or rolled back.
"""

from typing import Any, Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.store_error import to_service_error
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserRole


EVENT_NOT_FOUND_OR_UNAUTHORIZED = 'Event not found or unauthorized'


async def lock_owned_event(
    uow: AbstractUnitOfWork, *, event_id: int, organizer_id: int, lock_timeout_ms: int
) -> EventEntity:
    event = await uow.event_command_repo.get_for_update(
        event_id=event_id, lock_timeout_ms=lock_timeout_ms
    )
    # Someone else's event is reported as missing
    if event is None or not event.is_owned_by(organizer_id):
        raise NotFoundError(EVENT_NOT_FOUND_OR_UNAUTHORIZED)
    return event


class UpdateEventUseCase:
    def __init__(
        self, *, uow_factory: Callable[[], AbstractUnitOfWork], lock_timeout_ms: int = 0
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_timeout_ms = lock_timeout_ms
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, lock_timeout_ms=config.PURCHASE_LOCK_TIMEOUT_MS)

    @Logger.io
    async def update_event(
        self,
        *,
        event_id: int,
        organizer_id: int,
        role: UserRole | str,
        **changes: Any,
    ) -> EventEntity:
        """`changes` holds only the fields the organizer sent; `venue=None` clears the venue"""
        if role != UserRole.ORGANIZER:
            raise ForbiddenError('Only organizers can update events')

        with self.tracer.start_as_current_span(
            'use_case.update_event', attributes={'event.id': event_id, 'user.id': organizer_id}
        ):
            try:
                async with self.uow_factory() as uow:
                    event = await lock_owned_event(
                        uow,
                        event_id=event_id,
                        organizer_id=organizer_id,
                        lock_timeout_ms=self.lock_timeout_ms,
                    )
                    event.revise(**changes)
                    updated = await uow.event_command_repo.update(event=event)
                    await uow.commit()
            except (SQLAlchemyError, ConnectionError) as e:
                metrics.record_event_edit(operation='update', result='store_failure')
                raise to_service_error(e) from e

            metrics.record_event_edit(operation='update', result='success')
            return updated
