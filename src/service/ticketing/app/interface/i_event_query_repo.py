from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.app.dto.event_filter import EventFilter
from src.service.ticketing.domain.entity.event_entity import EventEntity


class IEventQueryRepo(ABC):
    """Event Query Repository Interface - CQRS Read Side, never trusted for purchase decisions"""

    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Optional[EventEntity]:
        pass

    @abstractmethod
    async def list_events(self, *, event_filter: EventFilter) -> List[EventEntity]:
        pass

    @abstractmethod
    async def list_by_organizer(self, *, organizer_id: int) -> List[EventEntity]:
        pass
