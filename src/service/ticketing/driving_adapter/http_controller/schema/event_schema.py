from datetime import datetime, timezone
from typing import Optional, Self

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from src.service.ticketing.domain.entity.event_entity import EventEntity


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    # Naive datetimes are taken as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    event_type: str = Field(..., min_length=1, max_length=50)
    event_date: datetime
    location: str = Field(..., min_length=1, max_length=255)
    venue: Optional[str] = Field(None, max_length=255)
    price: StrictInt = Field(..., ge=0)
    capacity: StrictInt = Field(..., gt=0)

    @field_validator('event_date')
    @classmethod
    def normalize_event_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_aware(value)

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'title': 'Jazz Night',
                'event_type': 'concert',
                'event_date': '2026-12-31T20:00:00Z',
                'location': 'Taipei',
                'venue': 'Blue Note',
                'price': 1500,
                'capacity': 300,
            }
        }
    )


class EventUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    event_type: Optional[str] = Field(None, min_length=1, max_length=50)
    event_date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    venue: Optional[str] = Field(None, max_length=255)
    price: Optional[StrictInt] = Field(None, ge=0)
    capacity: Optional[StrictInt] = Field(None, gt=0)

    @field_validator('event_date')
    @classmethod
    def normalize_event_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_aware(value)

    @model_validator(mode='after')
    def reject_null_required_fields(self) -> Self:
        # Omitted means unchanged; null only clears the venue
        nulled = sorted(
            name for name in self.model_fields_set if name != 'venue' and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f'{", ".join(nulled)} cannot be null')
        return self


class EventResponse(BaseModel):
    id: int
    organizer_id: int
    title: str
    event_type: str
    event_date: datetime
    location: str
    venue: Optional[str]
    price: int
    capacity: int
    sold: int
    available: int

    @classmethod
    def from_entity(cls, event: EventEntity) -> 'EventResponse':
        return cls(
            id=event.id or 0,
            organizer_id=event.organizer_id,
            title=event.title,
            event_type=event.event_type,
            event_date=event.event_date,
            location=event.location,
            venue=event.venue,
            price=event.price,
            capacity=event.capacity,
            sold=event.sold,
            available=event.available,
        )
