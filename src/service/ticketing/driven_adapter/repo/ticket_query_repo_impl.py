from typing import AsyncContextManager, Callable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.ticket_view import TicketView
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel


class TicketQueryRepoImpl(ITicketQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def list_by_user(self, *, user_id: int) -> List[TicketView]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel, EventModel)
                .join(EventModel, TicketModel.event_id == EventModel.id)
                .where(TicketModel.user_id == user_id)
                .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            )
            return [
                TicketView(
                    id=ticket.id,
                    event_id=event.id,
                    event_title=event.title,
                    event_date=event.event_date,
                    location=event.location,
                    venue=event.venue,
                    price=event.price,
                    created_at=ticket.created_at,
                )
                for ticket, event in result.all()
            ]
