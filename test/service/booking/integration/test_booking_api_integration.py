"""
HTTP surface of the booking service, driven through the FastAPI app.

The TestClient is session scoped, so every test seeds its own users,
route and campaign under unique names.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi.testclient import TestClient
import pytest
import uuid_utils


def _unique(prefix: str) -> str:
    return f'{prefix}-{uuid_utils.uuid7().hex[-8:]}'


def _as(user: dict[str, Any]) -> dict[str, str]:
    return {'X-User-Id': user['id']}


def _create_user(client: TestClient, *, role: str = 'customer') -> dict[str, Any]:
    response = client.post(
        '/api/user',
        json={'email': f'{_unique(role)}@example.com', 'name': role.title(), 'role': role},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _open_campaign(client: TestClient, admin: dict[str, Any]) -> dict[str, Any]:
    headers = _as(admin)
    route = client.post(
        '/api/campaign/route',
        json={'zip_code': '94110', 'name': _unique('Mission'), 'household_count': 8000},
        headers=headers,
    ).json()
    industry = client.post(
        '/api/campaign/industry', json={'name': _unique('Bakery')}, headers=headers
    ).json()

    now = datetime.now(timezone.utc)
    campaign = client.post(
        '/api/campaign',
        json={
            'name': _unique('Spring'),
            'mail_date': (now + timedelta(days=30)).isoformat(),
            'print_deadline': (now + timedelta(days=20)).isoformat(),
            'route_ids': [route['id']],
            'industry_ids': [industry['id']],
        },
        headers=headers,
    )
    assert campaign.status_code == 201, campaign.text
    opened = client.patch(
        f'/api/campaign/{campaign.json()["id"]}/status',
        json={'status': 'booking_open'},
        headers=headers,
    )
    assert opened.status_code == 200, opened.text
    return {'campaign': opened.json(), 'route': route, 'industry': industry}


@pytest.mark.integration
class TestBookingApi:
    def test_health(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_customer_books_pays_and_cancels(self, client: TestClient) -> None:
        admin = _create_user(client, role='admin')
        customer = _create_user(client)
        seeded = _open_campaign(client, admin)
        campaign_id = seeded['campaign']['id']

        quote = client.get(
            f'/api/campaign/{campaign_id}/quote',
            params={'quantity': 2},
            headers=_as(customer),
        )
        assert quote.status_code == 200
        assert quote.json()['total_price'] == 110000

        created = client.post(
            '/api/booking',
            json={
                'campaign_id': campaign_id,
                'route_id': seeded['route']['id'],
                'industry_id': seeded['industry']['id'],
                'business_name': 'Sunrise Bakery',
                'contact_email': 'owner@sunrise.example',
                'quantity': 2,
            },
            headers=_as(customer),
        )
        assert created.status_code == 201, created.text
        booking = created.json()
        assert booking['amount'] == 110000
        assert booking['payment_status'] == 'pending'

        slots = client.get(f'/api/campaign/{campaign_id}/slots', headers=_as(customer)).json()
        assert slots['summary']['pending_slots'] == 1

        paid = client.post(
            f'/api/payment/{booking["id"]}/succeeded',
            json={'amount_paid': 110000, 'payment_ref': 'pi_api'},
        )
        assert paid.status_code == 200, paid.text
        assert paid.json()['payment_status'] == 'paid'

        slots = client.get(f'/api/campaign/{campaign_id}/slots', headers=_as(customer)).json()
        assert slots['summary']['booked_slots'] == 1
        assert slots['summary']['revenue'] == 110000

        cancelled = client.post(f'/api/booking/{booking["id"]}/cancel', headers=_as(customer))
        assert cancelled.status_code == 200, cancelled.text
        body = cancelled.json()
        assert body['booking']['status'] == 'cancelled'
        assert body['booking']['refund_status'] == 'pending'

        mine = client.get('/api/booking/my_booking', headers=_as(customer)).json()
        assert [b['id'] for b in mine] == [booking['id']]

    def test_second_customer_cannot_take_a_paid_slot(self, client: TestClient) -> None:
        admin = _create_user(client, role='admin')
        first, second = _create_user(client), _create_user(client)
        seeded = _open_campaign(client, admin)
        payload = {
            'campaign_id': seeded['campaign']['id'],
            'route_id': seeded['route']['id'],
            'industry_id': seeded['industry']['id'],
            'business_name': 'Corner Bakery',
            'contact_email': 'hello@corner.example',
        }

        booking = client.post('/api/booking', json=payload, headers=_as(first)).json()
        client.post(
            f'/api/payment/{booking["id"]}/succeeded',
            json={'amount_paid': 60000, 'payment_ref': 'pi_first'},
        )

        response = client.post('/api/booking', json=payload, headers=_as(second))

        assert response.status_code == 409

    def test_admin_endpoints_refuse_customers(self, client: TestClient) -> None:
        customer = _create_user(client)

        response = client.post(
            '/api/campaign/industry', json={'name': _unique('Florist')}, headers=_as(customer)
        )

        assert response.status_code == 403

    def test_other_customers_booking_is_hidden(self, client: TestClient) -> None:
        admin = _create_user(client, role='admin')
        owner, stranger = _create_user(client), _create_user(client)
        seeded = _open_campaign(client, admin)
        booking = client.post(
            '/api/booking',
            json={
                'campaign_id': seeded['campaign']['id'],
                'route_id': seeded['route']['id'],
                'industry_id': seeded['industry']['id'],
                'business_name': 'Sunrise Bakery',
                'contact_email': 'owner@sunrise.example',
            },
            headers=_as(owner),
        ).json()

        assert client.get(f'/api/booking/{booking["id"]}', headers=_as(stranger)).status_code == 403
        assert client.get(f'/api/booking/{booking["id"]}', headers=_as(admin)).status_code == 200

    def test_unknown_user_is_not_found(self, client: TestClient) -> None:
        response = client.get('/api/user/me', headers={'X-User-Id': 'nobody'})

        assert response.status_code == 404

    def test_schedule_accepts_naive_datetimes_as_utc(self, client: TestClient) -> None:
        admin = _create_user(client, role='admin')
        campaign = _open_campaign(client, admin)['campaign']
        mail_date = datetime.fromisoformat(campaign['mail_date'])
        earlier = (mail_date - timedelta(days=5)).replace(tzinfo=None, microsecond=0)
        later = (mail_date + timedelta(days=1)).replace(tzinfo=None, microsecond=0)

        moved = client.patch(
            f'/api/campaign/{campaign["id"]}',
            json={'print_deadline': earlier.isoformat()},
            headers=_as(admin),
        )
        rejected = client.patch(
            f'/api/campaign/{campaign["id"]}',
            json={'print_deadline': later.isoformat()},
            headers=_as(admin),
        )

        assert moved.status_code == 200, moved.text
        assert datetime.fromisoformat(moved.json()['print_deadline']) == earlier.replace(
            tzinfo=timezone.utc
        )
        assert rejected.status_code == 400
