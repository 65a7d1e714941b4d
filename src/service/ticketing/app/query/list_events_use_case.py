from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, InvalidRequestError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.event_filter import EventFilter
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserRole


class ListEventsUseCase:
    def __init__(self, event_query_repo: IEventQueryRepo) -> None:
        self.event_query_repo = event_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
    ) -> Self:
        return cls(event_query_repo=event_query_repo)

    @Logger.io
    async def list_events(self, *, event_filter: EventFilter) -> List[EventEntity]:
        if (
            event_filter.min_price is not None
            and event_filter.max_price is not None
            and event_filter.min_price > event_filter.max_price
        ):
            raise InvalidRequestError('min_price cannot be greater than max_price')

        return await self.event_query_repo.list_events(event_filter=event_filter)

    @Logger.io
    async def list_by_organizer(
        self, *, organizer_id: int, role: UserRole | str
    ) -> List[EventEntity]:
        if role != UserRole.ORGANIZER:
            raise ForbiddenError('Only organizers have events')

        events = await self.event_query_repo.list_by_organizer(organizer_id=organizer_id)
        Logger.base.info(f'[LIST_BY_ORGANIZER] Found {len(events)} events for organizer {organizer_id}')
        return events
