"""
Unit of Work Pattern - one database transaction shared by several repositories

Architecture:
- UoW opens a fresh session on enter and closes it on exit
- UoW owns commit; exit always rolls back, which is a no-op after a successful commit
- Repositories receive the UoW session, so every statement runs in the same transaction
- Use cases coordinate repositories through the UoW
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


if TYPE_CHECKING:
    from src.service.ticketing.app.interface.i_event_command_repo import IEventCommandRepo
    from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            event = await uow.event_command_repo.get_for_update(event_id=...)
            await uow.ticket_command_repo.create_tickets(tickets=...)
            await uow.commit()
    """

    event_command_repo: IEventCommandRepo
    ticket_command_repo: ITicketCommandRepo

    # Set once commit() is entered; a failure after this point has an unknown outcome
    committing: bool = False

    async def __aenter__(self) -> AbstractUnitOfWork:
        self.committing = False
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        self.committing = True
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.ticketing.driven_adapter.repo.event_command_repo_impl import (
            EventCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )

        self.session = self._session_maker()
        self.event_command_repo = EventCommandRepoImpl(session=self.session)
        self.ticket_command_repo = TicketCommandRepoImpl(session=self.session)
        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
