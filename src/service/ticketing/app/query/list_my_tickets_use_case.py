from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.ticket_view import TicketView
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo


class ListMyTicketsUseCase:
    def __init__(self, ticket_query_repo: ITicketQueryRepo) -> None:
        self.ticket_query_repo = ticket_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo)

    @Logger.io
    async def list_my_tickets(self, *, user_id: int) -> List[TicketView]:
        return await self.ticket_query_repo.list_by_user(user_id=user_id)
