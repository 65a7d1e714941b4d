from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.ticketing.app.command.purchase_tickets_use_case import PurchaseTicketsUseCase
from src.service.ticketing.app.command.update_event_use_case import UpdateEventUseCase
from src.service.ticketing.app.dto.event_filter import EventFilter
from src.service.ticketing.app.query.get_event_use_case import GetEventUseCase
from src.service.ticketing.app.query.list_events_use_case import ListEventsUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    require_organizer,
)
from src.service.ticketing.driving_adapter.http_controller.schema.event_schema import (
    EventCreateRequest,
    EventResponse,
    EventUpdateRequest,
)
from src.service.ticketing.driving_adapter.http_controller.schema.purchase_schema import (
    PurchaseRequest,
    PurchaseResponse,
)
from src.service.ticketing.driving_adapter.http_controller.user_controller import (
    get_current_user,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    current_user: UserEntity = Depends(require_organizer),
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.create_event(
        organizer_id=current_user.id or 0,
        role=current_user.role,
        title=request.title,
        event_type=request.event_type,
        event_date=request.event_date,
        location=request.location,
        venue=request.venue,
        price=request.price,
        capacity=request.capacity,
    )
    return EventResponse.from_entity(event)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_events(
    event_type: Optional[str] = None,
    on_date: Optional[date] = Query(None, alias='date'),
    location: Optional[str] = None,
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_events(
        event_filter=EventFilter(
            event_type=event_type,
            on_date=on_date,
            location=location,
            min_price=min_price,
            max_price=max_price,
        )
    )
    return [EventResponse.from_entity(event) for event in events]


# Declared before '/{event_id}' so the literal path wins
@router.get('/my-events', status_code=status.HTTP_200_OK)
@Logger.io
async def list_my_events(
    current_user: UserEntity = Depends(require_organizer),
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_by_organizer(
        organizer_id=current_user.id or 0, role=current_user.role
    )
    return [EventResponse.from_entity(event) for event in events]


@router.get('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event(
    event_id: int,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    event = await use_case.get_event(event_id=event_id)
    return EventResponse.from_entity(event)


@router.put('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def update_event(
    event_id: int,
    request: EventUpdateRequest,
    current_user: UserEntity = Depends(require_organizer),
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.update_event(
        event_id=event_id,
        organizer_id=current_user.id or 0,
        role=current_user.role,
        **request.model_dump(exclude_unset=True),
    )
    return EventResponse.from_entity(event)


@router.delete('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_event(
    event_id: int,
    current_user: UserEntity = Depends(require_organizer),
    use_case: DeleteEventUseCase = Depends(DeleteEventUseCase.depends),
) -> dict:
    await use_case.delete_event(
        event_id=event_id, organizer_id=current_user.id or 0, role=current_user.role
    )
    return {'message': 'Event deleted successfully'}


@router.post('/{event_id}/purchase', status_code=status.HTTP_201_CREATED)
@Logger.io
async def purchase_tickets(
    event_id: int,
    request: PurchaseRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: PurchaseTicketsUseCase = Depends(PurchaseTicketsUseCase.depends),
) -> PurchaseResponse:
    # Role is checked by the use case after quantity, so a bad body is always a 400
    with tracer.start_as_current_span(
        'controller.purchase_tickets',
        attributes={'event.id': event_id, 'user.id': current_user.id or 0},
    ):
        result = await use_case.purchase(
            event_id=event_id,
            user_id=current_user.id or 0,
            role=current_user.role,
            quantity=request.quantity,
        )
        return PurchaseResponse.from_result(result)
