from datetime import datetime, timezone

import pytest

from src.platform.exception.exceptions import ConflictError, InsufficientAvailabilityError
from src.service.ticketing.domain.entity.event_entity import EventEntity
from test.test_constants import TEST_BUYER_ID_1, TEST_EVENT_ID_1, TEST_ORGANIZER_ID_1


pytestmark = pytest.mark.unit

EVENT_DATE = datetime(2026, 12, 31, 20, 0, tzinfo=timezone.utc)


def _event(**overrides) -> EventEntity:
    fields = {
        'id': TEST_EVENT_ID_1,
        'organizer_id': TEST_ORGANIZER_ID_1,
        'title': 'Jazz Night',
        'event_type': 'concert',
        'event_date': EVENT_DATE,
        'location': 'Taipei',
        'price': 1500,
        'capacity': 10,
    }
    fields.update(overrides)
    return EventEntity(**fields)


class TestEventCreation:
    def test_new_event_has_nothing_sold(self):
        event = _event()

        assert event.sold == 0
        assert event.available == 10

    @pytest.mark.parametrize('field', ['title', 'event_type', 'location'])
    def test_blank_text_fields_are_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            _event(**{field: '   '})

    @pytest.mark.parametrize('capacity', [0, -5])
    def test_capacity_must_be_positive(self, capacity):
        with pytest.raises(ValueError):
            _event(capacity=capacity)

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValueError):
            _event(price=-1)

    def test_zero_price_is_allowed(self):
        assert _event(price=0).price == 0

    def test_naive_event_date_is_rejected(self):
        with pytest.raises(ValueError):
            _event(event_date=datetime(2026, 12, 31, 20, 0))

    def test_sold_cannot_exceed_capacity(self):
        with pytest.raises(ValueError):
            _event(capacity=5, sold=6)


class TestReserveTickets:
    def test_reserve_issues_one_ticket_per_seat(self):
        event = _event(sold=2)

        tickets = event.reserve_tickets(buyer_id=TEST_BUYER_ID_1, quantity=3)

        assert len(tickets) == 3
        assert len({t.id for t in tickets}) == 3
        assert all(t.event_id == TEST_EVENT_ID_1 for t in tickets)
        assert all(t.user_id == TEST_BUYER_ID_1 for t in tickets)
        assert event.sold == 5
        assert event.available == 5

    def test_reserve_more_than_available(self):
        event = _event(capacity=10, sold=8)

        with pytest.raises(InsufficientAvailabilityError) as exc_info:
            event.reserve_tickets(buyer_id=TEST_BUYER_ID_1, quantity=3)

        assert exc_info.value.extra == {'remaining': 2, 'requested': 3}
        assert event.sold == 8

    def test_unsaved_event_cannot_be_reserved(self):
        with pytest.raises(ValueError):
            _event(id=None).reserve_tickets(buyer_id=TEST_BUYER_ID_1, quantity=1)

    def test_total_cost(self):
        assert _event(price=1500).total_cost(3) == 4500


class TestReviseEvent:
    def test_revise_updates_only_given_fields(self):
        event = _event()

        event.revise(title='Late Jazz Night', price=1800)

        assert event.title == 'Late Jazz Night'
        assert event.price == 1800
        assert event.location == 'Taipei'
        assert event.capacity == 10

    def test_capacity_may_drop_to_sold(self):
        event = _event(capacity=10, sold=4)

        event.revise(capacity=4)

        assert event.capacity == 4
        assert event.available == 0

    def test_capacity_below_sold_is_a_conflict(self):
        event = _event(capacity=10, sold=4)

        with pytest.raises(ConflictError) as exc_info:
            event.revise(capacity=3)

        assert exc_info.value.extra == {'sold': 4}
        assert event.capacity == 10

    def test_revise_runs_field_validation(self):
        event = _event()

        with pytest.raises(ValueError):
            event.revise(title='')

    def test_revise_can_clear_venue(self):
        event = _event(venue='Blue Note')

        event.revise(venue=None)

        assert event.venue is None
        assert event.title == 'Jazz Night'

    @pytest.mark.parametrize(
        'field', ['title', 'event_type', 'event_date', 'location', 'price', 'capacity']
    )
    def test_required_field_cannot_be_nulled(self, field):
        event = _event()

        with pytest.raises(ValueError):
            event.revise(**{field: None})

        assert getattr(event, field) is not None

    def test_failed_revise_changes_nothing(self):
        event = _event()

        with pytest.raises(ValueError):
            event.revise(title='Late Jazz Night', price=-1)

        assert event.title == 'Jazz Night'

    def test_sold_is_not_revisable(self):
        with pytest.raises(ValueError):
            _event().revise(sold=0)

    def test_event_with_sales_cannot_be_deleted(self):
        with pytest.raises(ConflictError):
            _event(sold=1).ensure_deletable()

    def test_event_without_sales_can_be_deleted(self):
        _event().ensure_deletable()

    def test_ownership(self):
        event = _event()

        assert event.is_owned_by(TEST_ORGANIZER_ID_1)
        assert not event.is_owned_by(TEST_ORGANIZER_ID_1 + 1)
