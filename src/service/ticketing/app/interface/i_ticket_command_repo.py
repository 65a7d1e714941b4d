from abc import ABC, abstractmethod
from typing import List

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create_tickets(self, *, tickets: List[TicketEntity]) -> None:
        """Insert all tickets in a single batch statement"""
        pass
