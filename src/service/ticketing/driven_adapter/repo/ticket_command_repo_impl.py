from typing import List

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create_tickets(self, *, tickets: List[TicketEntity]) -> None:
        if not tickets:
            return
        # One executemany round trip (asyncpg batches the parameter sets)
        await self.session.execute(
            insert(TicketModel),
            [
                {'id': ticket.id, 'user_id': ticket.user_id, 'event_id': ticket.event_id}
                for ticket in tickets
            ],
        )
