"""
Tests for the coffee profile API endpoints.
"""
import json
from unittest.mock import patch

from app.middleware.session_auth import SessionUser, issue_session_token
from app.models import CoffeeProfile
from app.services.coffee_profile_service import CoffeeProfileService


class TestGenerateProfileEndpoint:
    """Tests for POST /api/profile/generate."""

    def test_requires_session(self, client, sample_customer):
        response = client.post(
            '/api/profile/generate',
            data=json.dumps({'customerId': sample_customer.id}),
            content_type='application/json',
        )

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Unauthorized', 'code': 'AUTH_REQUIRED'}

    def test_rejects_invalid_token(self, client, sample_customer):
        headers = {'Authorization': 'Bearer not-a-token', 'Content-Type': 'application/json'}
        response = client.post(
            '/api/profile/generate',
            headers=headers,
            data=json.dumps({'customerId': sample_customer.id}),
        )
        assert response.status_code == 401

    def test_rejects_expired_token(self, app, client, sample_customer):
        token = issue_session_token(SessionUser(id='user_1'), max_age=-60)
        response = client.post(
            '/api/profile/generate',
            headers={'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'},
            data=json.dumps({'customerId': sample_customer.id}),
        )
        assert response.status_code == 401

    def test_missing_customer_id(self, client, auth_headers):
        response = client.post('/api/profile/generate', headers=auth_headers, data=json.dumps({}))

        assert response.status_code == 400
        assert response.get_json()['error'] == 'customerId is required'

    def test_blank_customer_id(self, client, auth_headers):
        response = client.post('/api/profile/generate', headers=auth_headers, data=json.dumps({'customerId': '  '}))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'MISSING_FIELD'

    def test_numeric_customer_id_is_looked_up(self, client, auth_headers):
        response = client.post('/api/profile/generate', headers=auth_headers, data=json.dumps({'customerId': 123}))

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Customer not found'

    def test_unknown_customer(self, client, auth_headers):
        response = client.post(
            '/api/profile/generate',
            headers=auth_headers,
            data=json.dumps({'customerId': 'missing'}),
        )

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Customer not found'

    def test_too_few_orders(self, client, auth_headers, sample_customer, sample_products, make_orders):
        make_orders(sample_customer, [(sample_products['long_black'], 1)], count=4)

        response = client.post(
            '/api/profile/generate',
            headers=auth_headers,
            data=json.dumps({'customerId': sample_customer.id}),
        )

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'Need at least 5 orders to generate profile'
        assert data['code'] == 'INSUFFICIENT_ORDERS'
        assert CoffeeProfile.query.count() == 0

    def test_generates_profile(self, client, auth_headers, sample_customer, sample_products, make_orders):
        make_orders(sample_customer, [(sample_products['long_black'], 1)], count=6)

        response = client.post(
            '/api/profile/generate',
            headers=auth_headers,
            data=json.dumps({'customerId': sample_customer.id}),
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data['profile']['customerId'] == sample_customer.id
        assert data['profile']['profileType'] == 'Bold Explorer'
        assert data['profile']['adventureScore'] == 2.3
        assert data['profile']['profileDescription'] == 'Loves dark roasts and strong flavors'
        assert data['profile']['confidence'] == 0.53
        assert data['analysis'] == {
            'ordersAnalyzed': 6,
            'topProducts': [{'name': 'Long Black', 'count': 6}],
        }

    def test_unexpected_failure(self, client, auth_headers, sample_customer):
        with patch(
            'app.api.profile.CoffeeProfileService.generate_profile',
            side_effect=RuntimeError('database unavailable'),
        ):
            response = client.post(
                '/api/profile/generate',
                headers=auth_headers,
                data=json.dumps({'customerId': sample_customer.id}),
            )

        assert response.status_code == 500
        data = response.get_json()
        assert data['error'] == 'Failed to generate profile'
        assert 'database unavailable' not in json.dumps(data)

    def test_concurrent_first_insert_still_succeeds(
        self, client, auth_headers, sample_customer, sample_products, make_orders, competing_insert
    ):
        make_orders(sample_customer, [(sample_products['long_black'], 1)], count=6)

        with patch.object(
            CoffeeProfileService, 'find_profile', autospec=True,
            side_effect=competing_insert(sample_customer.id),
        ):
            response = client.post(
                '/api/profile/generate',
                headers=auth_headers,
                data=json.dumps({'customerId': sample_customer.id}),
            )

        assert response.status_code == 200
        assert response.get_json()['profile']['profileType'] == 'Bold Explorer'
        assert CoffeeProfile.query.count() == 1


class TestGetProfileEndpoint:
    """Tests for GET /api/profile/<customer_id>."""

    def test_requires_session(self, client, sample_customer):
        response = client.get(f'/api/profile/{sample_customer.id}')
        assert response.status_code == 401

    def test_profile_not_found(self, client, auth_headers, sample_customer):
        response = client.get(f'/api/profile/{sample_customer.id}', headers=auth_headers)

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Profile not found'

    def test_returns_profile_and_recommendations(
        self, client, auth_headers, sample_customer, sample_products, make_orders
    ):
        make_orders(sample_customer, [(sample_products['long_black'], 1)], count=6)
        client.post(
            '/api/profile/generate',
            headers=auth_headers,
            data=json.dumps({'customerId': sample_customer.id}),
        )

        response = client.get(f'/api/profile/{sample_customer.id}', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['profile']['customer']['name'] == 'Alex Rivera'
        assert data['profile']['flavorNotes'] == ['chocolate', 'nutty']
        assert data['recommendations'][0]['type'] == 'based_on_profile'

    def test_unexpected_failure(self, client, auth_headers, sample_customer):
        with patch(
            'app.api.profile.CoffeeProfileService.get_profile',
            side_effect=RuntimeError('boom'),
        ):
            response = client.get(f'/api/profile/{sample_customer.id}', headers=auth_headers)

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Failed to fetch profile'


class TestAppErrors:

    def test_keeps_response_key_order(self, app, client):
        assert app.json.sort_keys is False

        response = client.get('/health')
        assert list(response.get_json()) == ['status', 'service']

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nowhere')

        assert response.status_code == 404
        assert response.get_json() == {'error': 'Not found', 'code': 'NOT_FOUND'}

    def test_wrong_method_is_json(self, client, auth_headers):
        response = client.delete('/api/profile/generate', headers=auth_headers)

        assert response.status_code == 405
        assert response.get_json()['error'] == 'Method not allowed'
