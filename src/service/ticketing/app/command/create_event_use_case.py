from datetime import datetime
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.di import Container
from src.platform.database.store_error import to_service_error
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserRole


class CreateEventUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def create_event(
        self,
        *,
        organizer_id: int,
        role: UserRole | str,
        title: str,
        event_type: str,
        event_date: datetime,
        location: str,
        price: int,
        capacity: int,
        venue: Optional[str] = None,
    ) -> EventEntity:
        if role != UserRole.ORGANIZER:
            raise ForbiddenError('Only organizers can create events')

        with self.tracer.start_as_current_span(
            'use_case.create_event', attributes={'user.id': organizer_id}
        ):
            # Validators raise ValueError -> 400
            event = EventEntity(
                organizer_id=organizer_id,
                title=title,
                event_type=event_type,
                event_date=event_date,
                location=location,
                venue=venue,
                price=price,
                capacity=capacity,
            )

            try:
                async with self.uow_factory() as uow:
                    created = await uow.event_command_repo.create(event=event)
                    await uow.commit()
            except (SQLAlchemyError, ConnectionError) as e:
                metrics.record_event_edit(operation='create', result='store_failure')
                raise to_service_error(e) from e

            metrics.record_event_edit(operation='create', result='success')
            Logger.base.info(f'[EVENT] organizer={organizer_id} created event {created.id}')
            return created
