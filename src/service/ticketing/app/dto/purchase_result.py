from typing import List
import uuid

import attrs


@attrs.define(frozen=True)
class PurchaseResult:
    """Outcome of a committed purchase; prices use the snapshot read under the row lock."""

    event_id: int
    ticket_ids: List[uuid.UUID]
    unit_price: int
    total_cost: int

    @property
    def ticket_count(self) -> int:
        return len(self.ticket_ids)
