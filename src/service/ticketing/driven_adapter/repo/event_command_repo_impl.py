"""
Event Command Repository Implementation - CQRS Write Side

Bound to the session of a unit of work. `get_for_update` is the only way the
purchase path reads an event: the row lock it takes is held until the unit
of work commits or rolls back.
"""

from typing import Optional

from sqlalchemy import delete, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.repo.event_mapper import model_to_event


class EventCommandRepoImpl(IEventCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_for_update(
        self, *, event_id: int, lock_timeout_ms: int = 0
    ) -> Optional[EventEntity]:
        if lock_timeout_ms > 0:
            # SET does not accept bind parameters; the value is an int
            await self.session.execute(text(f"SET LOCAL lock_timeout = '{int(lock_timeout_ms)}ms'"))

        result = await self.session.execute(
            select(EventModel)
            .where(EventModel.id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        event_model = result.scalar_one_or_none()
        return model_to_event(event_model) if event_model else None

    @Logger.io
    async def add_sold(self, *, event_id: int, quantity: int) -> None:
        result = await self.session.execute(
            update(EventModel)
            .where(EventModel.id == event_id, EventModel.sold + quantity <= EventModel.capacity)
            .values(sold=EventModel.sold + quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise ConflictError(f'Event {event_id} cannot take {quantity} more tickets')

    @Logger.io
    async def create(self, *, event: EventEntity) -> EventEntity:
        event_model = EventModel(
            organizer_id=event.organizer_id,
            title=event.title,
            event_type=event.event_type,
            event_date=event.event_date,
            location=event.location,
            venue=event.venue,
            price=event.price,
            capacity=event.capacity,
            sold=0,
        )
        self.session.add(event_model)
        await self.session.flush()
        await self.session.refresh(event_model)
        return model_to_event(event_model)

    @Logger.io
    async def update(self, *, event: EventEntity) -> EventEntity:
        await self.session.execute(
            update(EventModel)
            .where(EventModel.id == event.id)
            .values(
                title=event.title,
                event_type=event.event_type,
                event_date=event.event_date,
                location=event.location,
                venue=event.venue,
                price=event.price,
                capacity=event.capacity,
            )
            .execution_options(synchronize_session=False)
        )
        event_model = await self.session.get(EventModel, event.id, populate_existing=True)
        return model_to_event(event_model)  # type: ignore[arg-type]

    @Logger.io
    async def delete(self, *, event_id: int) -> None:
        await self.session.execute(delete(EventModel).where(EventModel.id == event_id))
