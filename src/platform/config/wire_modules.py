"""
Wire Modules Configuration

Modules whose `Provide[...]` markers need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    create_event_use_case,
    delete_event_use_case,
    purchase_tickets_use_case,
    update_event_use_case,
    user_use_case,
)
from src.service.ticketing.app.query import (
    get_event_use_case,
    list_events_use_case,
    list_my_tickets_use_case,
)
from src.service.ticketing.driving_adapter.http_controller import user_controller


WIRE_MODULES: list[ModuleType] = [
    purchase_tickets_use_case,
    create_event_use_case,
    update_event_use_case,
    delete_event_use_case,
    user_use_case,
    get_event_use_case,
    list_events_use_case,
    list_my_tickets_use_case,
    user_controller,
]
