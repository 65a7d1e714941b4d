"""
Purchase against a real PostgreSQL

Covers what only the database can prove: the row lock serializes buyers,
tickets and the counter commit together, and lock timeouts surface as
BusyError after the retry.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select, text

from src.platform.database.orm_db_setting import get_session_maker
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.exception.exceptions import (
    BusyError,
    ConflictError,
    InsufficientAvailabilityError,
)
from src.service.ticketing.app.command.purchase_tickets_use_case import PurchaseTicketsUseCase
from src.service.ticketing.domain.entity.user_entity import UserRole
from src.service.ticketing.driven_adapter.model import EventModel, TicketModel, UserModel


pytestmark = pytest.mark.integration


async def _seed(*, capacity: int, sold: int = 0, buyers: int = 1) -> tuple[int, list[int]]:
    async with get_session_maker()() as session:
        organizer = UserModel(email='organizer@test.com', hashed_password='x', role='organizer')
        buyer_models = [
            UserModel(email=f'buyer{i}@test.com', hashed_password='x', role='buyer')
            for i in range(buyers)
        ]
        session.add_all([organizer, *buyer_models])
        await session.flush()

        event = EventModel(
            organizer_id=organizer.id,
            title='Jazz Night',
            event_type='concert',
            event_date=datetime(2026, 12, 31, 20, 0, tzinfo=timezone.utc),
            location='Taipei',
            price=1500,
            capacity=capacity,
            sold=sold,
        )
        session.add(event)
        await session.commit()
        return event.id, [b.id for b in buyer_models]


async def _sold_and_ticket_count(event_id: int) -> tuple[int, int]:
    async with get_session_maker()() as session:
        sold = await session.scalar(select(EventModel.sold).where(EventModel.id == event_id))
        tickets = await session.scalar(
            select(func.count()).select_from(TicketModel).where(TicketModel.event_id == event_id)
        )
        return sold or 0, tickets or 0


def _use_case(lock_timeout_ms: int = 5000) -> PurchaseTicketsUseCase:
    return PurchaseTicketsUseCase(
        uow_factory=lambda: SqlAlchemyUnitOfWork(get_session_maker()),
        lock_timeout_ms=lock_timeout_ms,
    )


class TestPurchaseIntegration:
    async def test_purchase_commits_tickets_and_counter(self):
        # Given
        event_id, [buyer_id] = await _seed(capacity=10)

        # When
        result = await _use_case().purchase(
            event_id=event_id, user_id=buyer_id, role=UserRole.BUYER, quantity=3
        )

        # Then
        assert result.ticket_count == 3
        assert result.total_cost == 4500
        assert await _sold_and_ticket_count(event_id) == (3, 3)

    async def test_insufficient_leaves_state_untouched(self):
        event_id, [buyer_id] = await _seed(capacity=10, sold=8)

        with pytest.raises(InsufficientAvailabilityError) as exc_info:
            await _use_case().purchase(
                event_id=event_id, user_id=buyer_id, role=UserRole.BUYER, quantity=3
            )

        assert exc_info.value.extra['remaining'] == 2
        assert await _sold_and_ticket_count(event_id) == (8, 0)

    async def test_concurrent_purchases_never_oversell(self):
        # Given: 10 tickets, 15 buyers each asking for one
        event_id, buyer_ids = await _seed(capacity=10, buyers=15)
        use_case = _use_case()

        # When
        results = await asyncio.gather(
            *[
                use_case.purchase(
                    event_id=event_id, user_id=buyer_id, role=UserRole.BUYER, quantity=1
                )
                for buyer_id in buyer_ids
            ],
            return_exceptions=True,
        )

        # Then
        successes = [r for r in results if not isinstance(r, BaseException)]
        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(successes) == 10
        assert all(isinstance(f, InsufficientAvailabilityError) for f in failures)
        assert await _sold_and_ticket_count(event_id) == (10, 10)

    async def test_lock_held_elsewhere_surfaces_busy(self):
        # Given: another transaction holds the event row
        event_id, [buyer_id] = await _seed(capacity=10)

        async with get_session_maker()() as holder:
            await holder.execute(
                text('SELECT id FROM event WHERE id = :id FOR UPDATE'), {'id': event_id}
            )

            # When
            with pytest.raises(BusyError):
                await _use_case(lock_timeout_ms=100).purchase(
                    event_id=event_id, user_id=buyer_id, role=UserRole.BUYER, quantity=1
                )

            await holder.rollback()

        # Then
        assert await _sold_and_ticket_count(event_id) == (0, 0)


class TestEventCommandRepoIntegration:
    async def test_add_sold_refuses_to_pass_capacity(self):
        # Given: 9 of 10 sold
        event_id, _ = await _seed(capacity=10, sold=9)

        # When: the counter is bumped past capacity without a reservation check
        with pytest.raises(ConflictError):
            async with SqlAlchemyUnitOfWork(get_session_maker()) as uow:
                await uow.event_command_repo.add_sold(event_id=event_id, quantity=2)
                await uow.commit()

        # Then
        assert await _sold_and_ticket_count(event_id) == (9, 0)

    async def test_add_sold_up_to_capacity(self):
        event_id, _ = await _seed(capacity=10, sold=9)

        async with SqlAlchemyUnitOfWork(get_session_maker()) as uow:
            await uow.event_command_repo.add_sold(event_id=event_id, quantity=1)
            await uow.commit()

        assert await _sold_and_ticket_count(event_id) == (10, 0)
