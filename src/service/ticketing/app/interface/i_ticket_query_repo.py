from abc import ABC, abstractmethod
from typing import List

from src.service.ticketing.app.dto.ticket_view import TicketView


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def list_by_user(self, *, user_id: int) -> List[TicketView]:
        """Tickets owned by the user, newest first"""
        pass
