from typing import List
import uuid

from pydantic import BaseModel, ConfigDict, StrictInt
from pydantic.alias_generators import to_camel

from src.service.ticketing.app.dto.purchase_result import PurchaseResult


class PurchaseRequest(BaseModel):
    # Strict so "2", 2.0 and true are rejected rather than coerced; range is checked by the use case
    quantity: StrictInt

    model_config = ConfigDict(json_schema_extra={'example': {'quantity': 2}})


class PurchaseResponse(BaseModel):
    message: str = 'Tickets purchased successfully'
    ticket_count: int
    total_cost: int
    event_id: int
    unit_price: int
    ticket_ids: List[uuid.UUID]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_result(cls, result: PurchaseResult) -> 'PurchaseResponse':
        return cls(
            ticket_count=result.ticket_count,
            total_cost=result.total_cost,
            event_id=result.event_id,
            unit_price=result.unit_price,
            ticket_ids=result.ticket_ids,
        )
