from datetime import datetime
from typing import Optional
import uuid

import attrs


@attrs.define(frozen=True)
class TicketView:
    """A purchased ticket joined with the event it admits to"""

    id: uuid.UUID
    event_id: int
    event_title: str
    event_date: datetime
    location: str
    venue: Optional[str]
    price: int
    created_at: Optional[datetime] = None
