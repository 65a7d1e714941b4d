"""
End-to-end HTTP flow against the test app and a real database:
register, create an event, browse, purchase, list tickets, edit.
"""

from typing import Any

from fastapi.testclient import TestClient
import pytest

from src.platform.constant.route_constant import (
    EVENT_BASE,
    EVENT_DELETE,
    EVENT_GET,
    EVENT_MY_EVENTS,
    EVENT_PURCHASE,
    EVENT_UPDATE,
    TICKET_MY_TICKETS,
    USER_CREATE,
    USER_LOGIN,
    USER_ME,
)
from test.test_constants import (
    DEFAULT_PASSWORD,
    TEST_ANOTHER_ORGANIZER_EMAIL,
    TEST_BUYER_EMAIL,
    TEST_EVENT_PAYLOAD,
    TEST_ORGANIZER_EMAIL,
)


pytestmark = pytest.mark.integration


def _register(client: TestClient, email: str, role: str) -> dict[str, str]:
    response = client.post(
        USER_CREATE, json={'email': email, 'password': DEFAULT_PASSWORD, 'role': role}
    )
    assert response.status_code == 201, response.text
    client.cookies.clear()
    return {'Authorization': f'Bearer {response.json()["token"]}'}


def _create_event(client: TestClient, headers: dict[str, str], **overrides: Any) -> dict:
    response = client.post(EVENT_BASE, json={**TEST_EVENT_PAYLOAD, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestUserApi:
    def test_register_login_and_me(self, client):
        _register(client, TEST_BUYER_EMAIL, 'buyer')

        login = client.post(
            USER_LOGIN, json={'email': TEST_BUYER_EMAIL, 'password': DEFAULT_PASSWORD}
        )
        assert login.status_code == 200
        assert 'fastapiusersauth' in login.cookies

        me = client.get(USER_ME)
        assert me.status_code == 200
        assert me.json()['email'] == TEST_BUYER_EMAIL
        assert me.json()['role'] == 'buyer'

    def test_duplicate_email(self, client):
        _register(client, TEST_BUYER_EMAIL, 'buyer')

        response = client.post(
            USER_CREATE,
            json={'email': TEST_BUYER_EMAIL, 'password': DEFAULT_PASSWORD, 'role': 'buyer'},
        )

        assert response.status_code == 409

    def test_wrong_password(self, client):
        _register(client, TEST_BUYER_EMAIL, 'buyer')

        response = client.post(USER_LOGIN, json={'email': TEST_BUYER_EMAIL, 'password': 'nope1234'})

        assert response.status_code == 401


class TestPurchaseFlow:
    def test_buyer_purchases_and_sees_tickets(self, client):
        # Given
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        buyer = _register(client, TEST_BUYER_EMAIL, 'buyer')
        event = _create_event(client, organizer, capacity=10)
        assert event['sold'] == 0
        assert event['available'] == 10

        # When
        response = client.post(
            EVENT_PURCHASE.format(event_id=event['id']), json={'quantity': 2}, headers=buyer
        )

        # Then
        assert response.status_code == 201, response.text
        body = response.json()
        assert body['ticketCount'] == 2
        assert body['totalCost'] == 3000

        detail = client.get(EVENT_GET.format(event_id=event['id'])).json()
        assert detail['sold'] == 2
        assert detail['available'] == 8

        tickets = client.get(TICKET_MY_TICKETS, headers=buyer).json()
        assert sorted(t['id'] for t in tickets) == sorted(body['ticketIds'])
        assert all(t['event_id'] == event['id'] for t in tickets)

    def test_insufficient_availability(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        buyer = _register(client, TEST_BUYER_EMAIL, 'buyer')
        event = _create_event(client, organizer, capacity=2)

        response = client.post(
            EVENT_PURCHASE.format(event_id=event['id']), json={'quantity': 3}, headers=buyer
        )

        assert response.status_code == 409
        assert response.json()['remaining'] == 2

    def test_organizer_cannot_purchase(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        event = _create_event(client, organizer)

        response = client.post(
            EVENT_PURCHASE.format(event_id=event['id']), json={'quantity': 1}, headers=organizer
        )

        assert response.status_code == 403


class TestEventManagement:
    def test_list_filters(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        _create_event(client, organizer, title='Jazz Night', event_type='concert', price=1500)
        _create_event(
            client,
            organizer,
            title='Hamlet',
            event_type='theater',
            location='Kaohsiung',
            price=800,
            event_date='2027-01-15T19:30:00Z',
        )

        concerts = client.get(EVENT_BASE, params={'event_type': 'concert'}).json()
        cheap = client.get(EVENT_BASE, params={'max_price': 1000}).json()
        by_location = client.get(EVENT_BASE, params={'location': 'kaoh'}).json()
        by_date = client.get(EVENT_BASE, params={'date': '2027-01-15'}).json()

        assert [e['title'] for e in concerts] == ['Jazz Night']
        assert [e['title'] for e in cheap] == ['Hamlet']
        assert [e['title'] for e in by_location] == ['Hamlet']
        assert [e['title'] for e in by_date] == ['Hamlet']

    def test_inverted_price_range(self, client):
        response = client.get(EVENT_BASE, params={'min_price': 100, 'max_price': 10})

        assert response.status_code == 400

    def test_my_events_only_lists_own(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        other = _register(client, TEST_ANOTHER_ORGANIZER_EMAIL, 'organizer')
        _create_event(client, organizer, title='Mine')
        _create_event(client, other, title='Theirs')

        mine = client.get(EVENT_MY_EVENTS, headers=organizer).json()

        assert [e['title'] for e in mine] == ['Mine']

    def test_capacity_cannot_drop_below_sold(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        buyer = _register(client, TEST_BUYER_EMAIL, 'buyer')
        event = _create_event(client, organizer, capacity=10)
        client.post(
            EVENT_PURCHASE.format(event_id=event['id']), json={'quantity': 4}, headers=buyer
        )

        too_low = client.put(
            EVENT_UPDATE.format(event_id=event['id']), json={'capacity': 3}, headers=organizer
        )
        at_sold = client.put(
            EVENT_UPDATE.format(event_id=event['id']), json={'capacity': 4}, headers=organizer
        )

        assert too_low.status_code == 409
        assert at_sold.status_code == 200
        assert at_sold.json()['available'] == 0

    def test_other_organizer_cannot_edit(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        other = _register(client, TEST_ANOTHER_ORGANIZER_EMAIL, 'organizer')
        event = _create_event(client, organizer)

        response = client.put(
            EVENT_UPDATE.format(event_id=event['id']), json={'title': 'Hijacked'}, headers=other
        )

        assert response.status_code == 404

    def test_delete_only_without_sales(self, client):
        organizer = _register(client, TEST_ORGANIZER_EMAIL, 'organizer')
        buyer = _register(client, TEST_BUYER_EMAIL, 'buyer')
        sold_event = _create_event(client, organizer, title='Sold')
        empty_event = _create_event(client, organizer, title='Empty')
        client.post(
            EVENT_PURCHASE.format(event_id=sold_event['id']), json={'quantity': 1}, headers=buyer
        )

        blocked = client.delete(EVENT_DELETE.format(event_id=sold_event['id']), headers=organizer)
        deleted = client.delete(EVENT_DELETE.format(event_id=empty_event['id']), headers=organizer)

        assert blocked.status_code == 409
        assert deleted.status_code == 200
        assert client.get(EVENT_GET.format(event_id=empty_event['id'])).status_code == 404
