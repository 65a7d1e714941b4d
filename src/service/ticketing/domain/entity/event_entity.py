"""
Event entity - owner of the per-event invariant `0 <= sold <= capacity`

`sold` only moves through `reserve_tickets`; organizer edits go through
`revise`, which never touches it.
"""

from datetime import datetime
from typing import Any, List, Optional

import attrs

from src.platform.exception.exceptions import ConflictError, InsufficientAvailabilityError
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


REVISABLE_FIELDS = frozenset(
    {'title', 'event_type', 'event_date', 'location', 'venue', 'price', 'capacity'}
)
NULLABLE_FIELDS = frozenset({'venue'})


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


def _validate_non_negative_int(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f'Event {attribute.name} must be a non-negative integer')


def _validate_positive_int(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f'Event {attribute.name} must be a positive integer')


def _validate_aware_datetime(instance: object, attribute: attrs.Attribute, value: datetime) -> None:
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise ValueError(f'Event {attribute.name} must be a timezone-aware datetime')


@attrs.define
class EventEntity:
    organizer_id: int
    title: str = attrs.field(validator=_validate_non_empty_string)
    event_type: str = attrs.field(validator=_validate_non_empty_string)
    event_date: datetime = attrs.field(validator=_validate_aware_datetime)
    location: str = attrs.field(validator=_validate_non_empty_string)
    price: int = attrs.field(validator=_validate_non_negative_int)
    capacity: int = attrs.field(validator=_validate_positive_int)
    venue: Optional[str] = None
    sold: int = attrs.field(default=0, validator=_validate_non_negative_int)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __attrs_post_init__(self) -> None:
        if self.sold > self.capacity:
            raise ValueError('Event sold cannot exceed capacity')

    @property
    def available(self) -> int:
        return self.capacity - self.sold

    def is_owned_by(self, user_id: int) -> bool:
        return self.organizer_id == user_id

    def reserve_tickets(self, *, buyer_id: int, quantity: int) -> List[TicketEntity]:
        """
        Issue `quantity` tickets for `buyer_id` and count them as sold.

        Must run on a snapshot read under the event row lock; the caller
        persists both the tickets and the `sold` increment in one transaction.
        """
        if self.id is None:
            raise ValueError('Event must be persisted before tickets can be reserved')
        if quantity > self.available:
            raise InsufficientAvailabilityError(
                event_id=self.id, requested=quantity, remaining=self.available
            )

        tickets = [TicketEntity(event_id=self.id, user_id=buyer_id) for _ in range(quantity)]
        self.sold += quantity
        return tickets

    def total_cost(self, quantity: int) -> int:
        return self.price * quantity

    def revise(self, **changes: Any) -> None:
        """
        Apply an organizer edit. Only the given fields change; `venue=None`
        clears the venue, every other field must keep a value.
        """
        unknown = changes.keys() - REVISABLE_FIELDS
        if unknown:
            raise ValueError(f'Event fields cannot be revised: {", ".join(sorted(unknown))}')
        for name, value in changes.items():
            if value is None and name not in NULLABLE_FIELDS:
                raise ValueError(f'Event {name} cannot be null')

        capacity = changes.get('capacity')
        if isinstance(capacity, int) and capacity < self.sold:
            raise ConflictError(
                f'Capacity cannot be lower than the {self.sold} tickets already sold',
                extra={'sold': self.sold},
            )

        # Validated as a whole before anything on self changes
        revised = attrs.evolve(self, **changes)
        for name in changes:
            setattr(self, name, getattr(revised, name))

    def ensure_deletable(self) -> None:
        if self.sold > 0:
            raise ConflictError(
                'Cannot delete an event with sold tickets', extra={'sold': self.sold}
            )
