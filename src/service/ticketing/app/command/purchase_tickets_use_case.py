"""
Purchase Tickets Use Case - the only writer of `event.sold`

Flow (one unit of work per attempt):
1. Lock the event row (SELECT ... FOR UPDATE, transaction-local lock_timeout)
2. Re-check availability on the locked snapshot
3. Batch insert the tickets
4. sold = sold + quantity
5. Commit

Transient store errors get exactly one more attempt on a fresh unit of
work. A connection lost while committing is never retried: the commit may
have landed, and a second attempt could sell the tickets twice.
"""

import time
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.store_error import StoreErrorKind, classify_store_error
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    BusyError,
    CustomBaseError,
    ForbiddenError,
    InsufficientAvailabilityError,
    InvalidRequestError,
    NotFoundError,
    StoreFailureError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.dto.purchase_result import PurchaseResult
from src.service.ticketing.domain.entity.user_entity import UserRole


MAX_ATTEMPTS = 2


def _result_label(exc: BaseException) -> str:
    if isinstance(exc, InvalidRequestError):
        return 'invalid_request'
    if isinstance(exc, ForbiddenError):
        return 'forbidden'
    if isinstance(exc, NotFoundError):
        return 'not_found'
    if isinstance(exc, InsufficientAvailabilityError):
        return 'insufficient'
    if isinstance(exc, BusyError):
        return 'busy'
    return 'store_failure'


class PurchaseTicketsUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        lock_timeout_ms: int = 0,
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_timeout_ms = lock_timeout_ms
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, lock_timeout_ms=config.PURCHASE_LOCK_TIMEOUT_MS)

    @staticmethod
    def validate_quantity(quantity: object) -> int:
        # bool is an int subclass; True must not buy one ticket
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRequestError('Quantity must be a positive integer')
        return quantity

    @staticmethod
    def validate_role(role: UserRole | str) -> None:
        if role != UserRole.BUYER:
            raise ForbiddenError('Only buyers can purchase tickets')

    @Logger.io
    async def purchase(
        self, *, event_id: int, user_id: int, role: UserRole | str, quantity: int
    ) -> PurchaseResult:
        started = time.perf_counter()
        result_label = 'store_failure'
        ticket_count = 0
        metrics.concurrent_purchases.inc()
        try:
            with self.tracer.start_as_current_span(
                'use_case.purchase_tickets',
                attributes={
                    'event.id': event_id,
                    'user.id': user_id,
                    'purchase.quantity': quantity if isinstance(quantity, int) else -1,
                },
            ) as span:
                self.validate_quantity(quantity)
                self.validate_role(role)

                result = await self._purchase_with_retry(
                    event_id=event_id, user_id=user_id, quantity=quantity
                )

                span.set_attribute('purchase.total_cost', result.total_cost)
                result_label = 'success'
                ticket_count = result.ticket_count
                Logger.base.info(
                    f'[PURCHASE] event={event_id} user={user_id} '
                    f'tickets={result.ticket_count} total_cost={result.total_cost}'
                )
                return result
        except CustomBaseError as e:
            result_label = _result_label(e)
            raise
        finally:
            metrics.concurrent_purchases.dec()
            metrics.record_purchase(
                result=result_label,
                duration=time.perf_counter() - started,
                ticket_count=ticket_count,
            )

    async def _purchase_with_retry(
        self, *, event_id: int, user_id: int, quantity: int
    ) -> PurchaseResult:
        attempt = 0
        while True:
            attempt += 1
            uow = self.uow_factory()
            try:
                return await self._attempt(
                    uow=uow, event_id=event_id, user_id=user_id, quantity=quantity
                )
            except (SQLAlchemyError, ConnectionError) as e:
                kind = classify_store_error(e)

                if kind is StoreErrorKind.FATAL:
                    raise StoreFailureError() from e

                if kind is StoreErrorKind.CONNECTION_LOST and uow.committing:
                    Logger.base.error(
                        f'[PURCHASE] event={event_id} connection lost during commit, outcome unknown'
                    )
                    raise StoreFailureError(
                        'Connection lost while committing, purchase outcome unknown'
                    ) from e

                if attempt < MAX_ATTEMPTS:
                    Logger.base.warning(
                        f'[PURCHASE] event={event_id} attempt {attempt} failed ({kind}), retrying'
                    )
                    metrics.record_purchase_retry(kind=kind.value)
                    continue

                if kind is StoreErrorKind.BUSY:
                    raise BusyError() from e
                raise StoreFailureError() from e

    async def _attempt(
        self, *, uow: AbstractUnitOfWork, event_id: int, user_id: int, quantity: int
    ) -> PurchaseResult:
        async with uow:
            event = await uow.event_command_repo.get_for_update(
                event_id=event_id, lock_timeout_ms=self.lock_timeout_ms
            )
            if event is None:
                raise NotFoundError('Event not found')

            tickets = event.reserve_tickets(buyer_id=user_id, quantity=quantity)
            await uow.ticket_command_repo.create_tickets(tickets=tickets)
            await uow.event_command_repo.add_sold(event_id=event_id, quantity=quantity)
            await uow.commit()

        return PurchaseResult(
            event_id=event_id,
            ticket_ids=[ticket.id for ticket in tickets],
            unit_price=event.price,
            total_cost=event.total_cost(quantity),
        )
