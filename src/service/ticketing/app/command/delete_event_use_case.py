from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.store_error import to_service_error
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.command.update_event_use_case import lock_owned_event
from src.service.ticketing.domain.entity.user_entity import UserRole


class DeleteEventUseCase:
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
    async def delete_event(self, *, event_id: int, organizer_id: int, role: UserRole | str) -> None:
        if role != UserRole.ORGANIZER:
            raise ForbiddenError('Only organizers can delete events')

        with self.tracer.start_as_current_span(
            'use_case.delete_event', attributes={'event.id': event_id, 'user.id': organizer_id}
        ):
            try:
                async with self.uow_factory() as uow:
                    event = await lock_owned_event(
                        uow,
                        event_id=event_id,
                        organizer_id=organizer_id,
                        lock_timeout_ms=self.lock_timeout_ms,
                    )
                    event.ensure_deletable()
                    await uow.event_command_repo.delete(event_id=event_id)
                    await uow.commit()
            except (SQLAlchemyError, ConnectionError) as e:
                metrics.record_event_edit(operation='delete', result='store_failure')
                raise to_service_error(e) from e

            metrics.record_event_edit(operation='delete', result='success')
            Logger.base.info(f'[EVENT] organizer={organizer_id} deleted event {event_id}')
