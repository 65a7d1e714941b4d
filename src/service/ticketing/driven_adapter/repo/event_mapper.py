from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.driven_adapter.model.event_model import EventModel


def model_to_event(event_model: EventModel) -> EventEntity:
    return EventEntity(
        id=event_model.id,
        organizer_id=event_model.organizer_id,
        title=event_model.title,
        event_type=event_model.event_type,
        event_date=event_model.event_date,
        location=event_model.location,
        venue=event_model.venue,
        price=event_model.price,
        capacity=event_model.capacity,
        sold=event_model.sold,
        created_at=event_model.created_at,
        updated_at=event_model.updated_at,
    )
