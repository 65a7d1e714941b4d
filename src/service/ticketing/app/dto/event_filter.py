from datetime import date
from typing import Optional

import attrs


@attrs.define(frozen=True)
class EventFilter:
    event_type: Optional[str] = None
    on_date: Optional[date] = None  # calendar day of event_date, UTC
    location: Optional[str] = None  # case-insensitive substring
    min_price: Optional[int] = None
    max_price: Optional[int] = None
