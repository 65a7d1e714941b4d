"""
Event Query Repository Implementation - CQRS Read Side

Results are informational only; availability shown here may already be stale.
"""

from datetime import datetime, time, timedelta, timezone
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.event_filter import EventFilter
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.repo.event_mapper import model_to_event


class EventQueryRepoImpl(IEventQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[EventEntity]:
        async with self.session_factory() as session:
            event_model = await session.get(EventModel, event_id)
            return model_to_event(event_model) if event_model else None

    @Logger.io
    async def list_events(self, *, event_filter: EventFilter) -> List[EventEntity]:
        stmt = select(EventModel)

        if event_filter.event_type:
            stmt = stmt.where(EventModel.event_type == event_filter.event_type)
        if event_filter.on_date:
            day_start = datetime.combine(event_filter.on_date, time.min, tzinfo=timezone.utc)
            stmt = stmt.where(
                EventModel.event_date >= day_start,
                EventModel.event_date < day_start + timedelta(days=1),
            )
        if event_filter.location:
            stmt = stmt.where(EventModel.location.icontains(event_filter.location, autoescape=True))
        if event_filter.min_price is not None:
            stmt = stmt.where(EventModel.price >= event_filter.min_price)
        if event_filter.max_price is not None:
            stmt = stmt.where(EventModel.price <= event_filter.max_price)

        stmt = stmt.order_by(EventModel.event_date.asc(), EventModel.id.asc())

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [model_to_event(event_model) for event_model in result.scalars().all()]

    @Logger.io
    async def list_by_organizer(self, *, organizer_id: int) -> List[EventEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(EventModel)
                .where(EventModel.organizer_id == organizer_id)
                .order_by(EventModel.created_at.desc(), EventModel.id.desc())
            )
            return [model_to_event(event_model) for event_model in result.scalars().all()]
