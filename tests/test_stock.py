"""
Test suite for stock routes.
Tests cover items, stock movements, price history and low-stock listing.
"""

import os
import sys
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


def add_item(client, **overrides):
    payload = {'name': 'Oolong tea', 'unit': 'kg', 'unitPrice': '320.000', 'minStock': '2'}
    payload.update(overrides)
    response = client.post('/api/stock/items', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def move(client, item_id, type_, quantity, **extra):
    payload = {'itemId': item_id, 'type': type_, 'quantity': str(quantity), 'transactionDate': '2024-05-01'}
    payload.update(extra)
    return client.post('/api/stock/transactions', json=payload)


class TestStockItems:
    """Test stock item management."""

    def test_add_item(self, logged_in_client):
        item = add_item(logged_in_client)
        assert Decimal(item['unitPrice']) == Decimal('320000')
        assert Decimal(item['currentStock']) == Decimal('0')
        assert item['isActive'] is True

    def test_missing_unit_rejected(self, logged_in_client):
        response = logged_in_client.post('/api/stock/items', json={'name': 'Sugar', 'unitPrice': '1000'})
        assert response.status_code == 400
        assert 'unit' in response.get_json()['errors']

    def test_update_item(self, logged_in_client):
        item = add_item(logged_in_client)
        response = logged_in_client.put(f"/api/stock/items/{item['id']}", json={'minStock': '5'})
        assert Decimal(response.get_json()['minStock']) == Decimal('5')
        assert response.get_json()['name'] == 'Oolong tea'

    def test_delete_is_soft(self, logged_in_client):
        item = add_item(logged_in_client)
        assert logged_in_client.delete(f"/api/stock/items/{item['id']}").status_code == 200
        assert logged_in_client.get('/api/stock/items').get_json() == []


class TestStockTransactions:
    """Test stock movements."""

    def test_stock_in_and_out(self, logged_in_client):
        item = add_item(logged_in_client)
        assert move(logged_in_client, item['id'], 'in', 10, unitPrice='300000').status_code == 201
        assert move(logged_in_client, item['id'], 'out', 4).status_code == 201

        items = logged_in_client.get('/api/stock/items').get_json()
        assert Decimal(items[0]['currentStock']) == Decimal('6')

    def test_total_price_defaults_to_quantity_times_price(self, logged_in_client):
        item = add_item(logged_in_client)
        response = move(logged_in_client, item['id'], 'in', 3, unitPrice='1000')
        assert Decimal(response.get_json()['totalPrice']) == Decimal('3000')

    def test_unpriced_movement_reports_no_price(self, logged_in_client):
        item = add_item(logged_in_client)
        move(logged_in_client, item['id'], 'in', 2)
        body = move(logged_in_client, item['id'], 'out', 1).get_json()

        assert body['unitPrice'] is None
        assert body['totalPrice'] is None
        assert logged_in_client.get(f"/api/stock/items/{item['id']}/price-history").get_json() == []

    def test_cannot_take_more_than_in_stock(self, logged_in_client):
        item = add_item(logged_in_client)
        move(logged_in_client, item['id'], 'in', 1)
        response = move(logged_in_client, item['id'], 'out', 2)

        assert response.status_code == 400
        assert 'quantity' in response.get_json()['errors']

    def test_invalid_type_rejected(self, logged_in_client):
        item = add_item(logged_in_client)
        response = move(logged_in_client, item['id'], 'sideways', 1)
        assert response.status_code == 400

    def test_unknown_item(self, logged_in_client):
        response = move(logged_in_client, 999, 'in', 1)
        assert response.status_code == 404

    def test_price_history(self, logged_in_client):
        item = add_item(logged_in_client)
        move(logged_in_client, item['id'], 'in', 1, unitPrice='1000', transactionDate='2024-01-01')
        move(logged_in_client, item['id'], 'in', 1, unitPrice='1200', transactionDate='2024-02-01')
        move(logged_in_client, item['id'], 'out', 1, transactionDate='2024-03-01')

        history = logged_in_client.get(f"/api/stock/items/{item['id']}/price-history").get_json()
        assert [Decimal(h['unitPrice']) for h in history] == [Decimal('1200'), Decimal('1000')]

    def test_list_transactions_for_item(self, logged_in_client):
        first = add_item(logged_in_client)
        second = add_item(logged_in_client, name='Jasmine tea')
        move(logged_in_client, first['id'], 'in', 1)
        move(logged_in_client, second['id'], 'in', 1)

        rows = logged_in_client.get(f"/api/stock/transactions?itemId={second['id']}").get_json()
        assert [r['itemId'] for r in rows] == [second['id']]


class TestLowStock:
    """Test low-stock listing."""

    def test_low_stock(self, logged_in_client):
        low = add_item(logged_in_client, name='Cups', minStock='100')
        stocked = add_item(logged_in_client, name='Straws', minStock='1')
        move(logged_in_client, stocked['id'], 'in', 50)

        rows = logged_in_client.get('/api/stock/items/low').get_json()
        assert [r['id'] for r in rows] == [low['id']]
