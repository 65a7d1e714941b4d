from datetime import datetime
from typing import Optional
import uuid

from pydantic import BaseModel

from src.service.ticketing.app.dto.ticket_view import TicketView


class TicketResponse(BaseModel):
    id: uuid.UUID
    event_id: int
    event_title: str
    event_date: datetime
    location: str
    venue: Optional[str]
    price: int
    purchased_at: Optional[datetime]

    @classmethod
    def from_view(cls, view: TicketView) -> 'TicketResponse':
        return cls(
            id=view.id,
            event_id=view.event_id,
            event_title=view.event_title,
            event_date=view.event_date,
            location=view.location,
            venue=view.venue,
            price=view.price,
            purchased_at=view.created_at,
        )
