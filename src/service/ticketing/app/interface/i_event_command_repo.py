"""
Event Command Repository Interface - CQRS Write Side

All methods run on the session of the surrounding unit of work; nothing
here commits.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.event_entity import EventEntity


class IEventCommandRepo(ABC):
    @abstractmethod
    async def get_for_update(
        self, *, event_id: int, lock_timeout_ms: int = 0
    ) -> Optional[EventEntity]:
        """
        Read the event row while holding its row lock until the transaction ends

        Args:
            event_id: Event ID
            lock_timeout_ms: Transaction-local lock wait limit, 0 keeps the server default

        Returns:
            Snapshot of the event taken under the lock, None if it does not exist
        """
        pass

    @abstractmethod
    async def add_sold(self, *, event_id: int, quantity: int) -> None:
        """
        Increment `sold` by `quantity`; only the purchase path calls this.

        Raises ConflictError instead of pushing `sold` past `capacity`.
        """
        pass

    @abstractmethod
    async def create(self, *, event: EventEntity) -> EventEntity:
        pass

    @abstractmethod
    async def update(self, *, event: EventEntity) -> EventEntity:
        """Persist organizer-editable fields; `sold` is left untouched"""
        pass

    @abstractmethod
    async def delete(self, *, event_id: int) -> None:
        pass
