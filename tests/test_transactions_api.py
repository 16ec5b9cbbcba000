import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest

from tracker_api.categories import Category
from tracker_api.models import Transaction
from tests.factories import make_tx

pytestmark = pytest.mark.django_db


def payload(**overrides):
    data = {
        'description': 'Weekly groceries',
        'amount': 50.0,
        'date': '2024-03-15',
        'category': 'Groceries',
    }
    data.update(overrides)
    return data


def test_create_translates_category_label(api_client):
    response = api_client.post('/api/transactions', payload(category='Food & Dining'), format='json')

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['data']['category'] == 'Food & Dining'
    assert body['data']['amount'] == 50.0
    assert Transaction.objects.get(id=body['data']['id']).category == 'FOOD_DINING'


def test_create_accepts_storage_code_and_datetime(api_client):
    response = api_client.post('/api/transactions', payload(category='RENT', date='2024-03-15T10:30:00Z'),
                               format='json')

    assert response.status_code == 201
    assert response.json()['data']['category'] == 'Rent'
    assert response.json()['data']['date'] == '2024-03-15'


@pytest.mark.parametrize('overrides,field', [
    ({'category': 'Pets'}, 'category'),
    ({'description': ''}, 'description'),
    ({'description': 'x' * 101}, 'description'),
    ({'amount': 0}, 'amount'),
    ({'amount': -5}, 'amount'),
    ({'amount': 1000000}, 'amount'),
    ({'date': 'yesterday'}, 'date'),
])
def test_create_rejects_invalid_fields(api_client, overrides, field):
    response = api_client.post('/api/transactions', payload(**overrides), format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['error'] == "Validation failed"
    assert field in [detail['field'] for detail in body['details']]
    assert Transaction.objects.count() == 0


def test_amount_bounds_are_inclusive(api_client):
    assert api_client.post('/api/transactions', payload(amount=999999), format='json').status_code == 201
    assert api_client.post('/api/transactions', payload(amount=0.01), format='json').status_code == 201


def test_pagination(api_client):
    start = date(2024, 1, 1)
    Transaction.objects.bulk_create([
        Transaction(description=f"tx {i}", amount=Decimal('1.00'), date=start + timedelta(days=i),
                    category=Category.OTHER)
        for i in range(120)
    ])

    response = api_client.get('/api/transactions', {'page': 2, 'limit': 50})

    assert response.status_code == 200
    data = response.json()['data']
    assert len(data['transactions']) == 50
    assert data['pagination'] == {'page': 2, 'limit': 50, 'total': 120, 'pages': 3}
    # newest first: page 2 starts at the 51st newest row
    assert data['transactions'][0]['description'] == 'tx 69'


def test_list_defaults_and_filters(api_client):
    make_tx('10.00', category=Category.RENT, day=date(2024, 3, 1))
    make_tx('20.00', category=Category.GROCERIES, day=date(2024, 3, 31))
    make_tx('30.00', category=Category.GROCERIES, day=date(2024, 4, 1))

    data = api_client.get('/api/transactions').json()['data']
    assert data['pagination'] == {'page': 1, 'limit': 50, 'total': 3, 'pages': 1}

    march = api_client.get('/api/transactions', {'month': '2024-03'}).json()['data']
    assert [t['amount'] for t in march['transactions']] == [20.0, 10.0]

    groceries = api_client.get('/api/transactions', {'category': 'Groceries'}).json()['data']
    assert groceries['pagination']['total'] == 2

    unknown = api_client.get('/api/transactions', {'category': 'Pets'}).json()['data']
    assert unknown['pagination']['total'] == 3


def test_list_rejects_malformed_month(api_client):
    response = api_client.get('/api/transactions', {'month': 'March'})

    assert response.status_code == 400
    assert response.json()['details'][0]['field'] == 'month'


def test_retrieve_and_missing(api_client):
    tx = make_tx('12.50', category=Category.TRAVEL)

    found = api_client.get(f'/api/transactions/{tx.id}')
    assert found.status_code == 200
    assert found.json()['data']['category'] == 'Travel'

    missing = api_client.get(f'/api/transactions/{uuid.uuid4()}')
    assert missing.status_code == 404
    assert missing.json() == {'success': False, 'error': "Transaction not found"}

    assert api_client.get('/api/transactions/not-a-uuid').status_code == 404


def test_partial_update(api_client):
    tx = make_tx('12.50')

    response = api_client.put(f'/api/transactions/{tx.id}', {'amount': 99.99, 'category': 'Shopping'},
                              format='json')

    assert response.status_code == 200
    tx.refresh_from_db()
    assert tx.amount == Decimal('99.99')
    assert tx.category == 'SHOPPING'
    assert tx.description == "Test purchase"


def test_update_missing_and_invalid(api_client):
    assert api_client.put(f'/api/transactions/{uuid.uuid4()}', {'amount': 5}, format='json').status_code == 404

    tx = make_tx('12.50')
    response = api_client.put(f'/api/transactions/{tx.id}', {'category': 'Nope'}, format='json')
    assert response.status_code == 400


def test_delete(api_client):
    tx = make_tx('12.50')

    response = api_client.delete(f'/api/transactions/{tx.id}')

    assert response.status_code == 200
    assert response.json() == {'success': True, 'data': {'message': "Transaction deleted successfully"}}
    assert api_client.delete(f'/api/transactions/{tx.id}').status_code == 404


def test_export_csv(api_client):
    make_tx('10.00', category=Category.RENT, day=date(2024, 3, 1), description="March rent")
    make_tx('5.00', category=Category.GROCERIES, day=date(2024, 4, 1))

    response = api_client.get('/api/transactions/export', {'month': '2024-03'})

    assert response.status_code == 200
    assert response['Content-Type'].startswith('text/csv')
    content = response.content.decode()
    assert 'Total expenses,10.00' in content
    assert 'March rent,Rent,10.00' in content
    assert 'Groceries' not in content


def test_limit_is_capped(api_client):
    Transaction.objects.bulk_create([
        Transaction(description=f"tx {i}", amount=Decimal('1.00'), date=date(2024, 1, 1) + timedelta(days=i),
                    category=Category.OTHER)
        for i in range(120)
    ])

    data = api_client.get('/api/transactions', {'limit': 500}).json()['data']

    assert len(data['transactions']) == 100
    assert data['pagination'] == {'page': 1, 'limit': 100, 'total': 120, 'pages': 2}
