from datetime import datetime
from typing import Optional
import uuid

import attrs
from uuid_utils.compat import uuid7


@attrs.define
class TicketEntity:
    event_id: int
    user_id: int
    id: uuid.UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
