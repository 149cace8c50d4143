"""
Test suite for expense routes.
Tests cover creation with period derivation, filtering, partial edits,
deletion and the expense summary.
"""

import os
import sys
from decimal import Decimal

import pytest

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from formatters import format_amount_for_display  # noqa: E402


def add_expense(client, **overrides):
    payload = {
        'name': 'Milk',
        'category': 'ingredients',
        'amount': '250000',
        'expenseDate': '2024-03-15',
        'status': 'spent',
    }
    payload.update(overrides)
    response = client.post('/api/expenses', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestExpenseAccess:
    """Test expense access control."""

    def test_expense_requires_auth(self, client):
        response = client.get('/api/expenses')
        assert response.status_code == 401


class TestAddExpense:
    """Test adding expenses."""

    def test_add_expense_valid(self, logged_in_client):
        expense = add_expense(logged_in_client)
        assert expense['year'] == 2024
        assert expense['month'] == 3
        assert expense['status'] == 'spent'

    def test_display_formatted_amount_round_trip(self, logged_in_client):
        """'1.234.567' is stored as 1234567 and redisplays the same way."""
        expense = add_expense(logged_in_client, amount='1.234.567')
        assert Decimal(expense['amount']) == Decimal('1234567')
        assert format_amount_for_display(Decimal(expense['amount'])) == '1.234.567'

    def test_period_comes_from_date_not_client(self, logged_in_client):
        """Client-supplied year/month are ignored in favour of the date."""
        expense = add_expense(logged_in_client, expenseDate='2023-11-02', year=2030, month=1)
        assert expense['year'] == 2023
        assert expense['month'] == 11

    def test_status_defaults_to_spent(self, logged_in_client):
        payload = {'name': 'Rent', 'category': 'fixed', 'amount': '100', 'expenseDate': '2024-01-01'}
        response = logged_in_client.post('/api/expenses', json=payload)
        assert response.get_json()['status'] == 'spent'

    @pytest.mark.parametrize("field,value", [
        ('amount', '-1'),
        ('amount', '0'),
        ('amount', 'abc'),
        ('expenseDate', '15/03/2024'),
        ('status', 'paid'),
        ('name', ''),
        ('category', 'x' * 51),
    ])
    def test_invalid_field_rejected(self, logged_in_client, field, value):
        payload = {
            'name': 'Milk',
            'category': 'ingredients',
            'amount': '100',
            'expenseDate': '2024-03-15',
            field: value,
        }
        response = logged_in_client.post('/api/expenses', json=payload)
        assert response.status_code == 400
        assert field in response.get_json()['errors']

    def test_missing_fields_reported(self, logged_in_client):
        response = logged_in_client.post('/api/expenses', json={})
        assert response.status_code == 400
        errors = response.get_json()['errors']
        for field in ('name', 'category', 'amount', 'expenseDate'):
            assert field in errors


class TestExpenseListing:
    """Test filtering expenses."""

    def test_filter_by_year_and_month(self, logged_in_client):
        add_expense(logged_in_client, expenseDate='2024-03-01')
        add_expense(logged_in_client, expenseDate='2024-04-01')
        add_expense(logged_in_client, expenseDate='2023-03-01')

        assert len(logged_in_client.get('/api/expenses/2024').get_json()) == 2
        assert len(logged_in_client.get('/api/expenses/2024/3').get_json()) == 1
        assert len(logged_in_client.get('/api/expenses?year=2024&month=4').get_json()) == 1

    def test_filter_by_category(self, logged_in_client):
        add_expense(logged_in_client, category='fixed')
        add_expense(logged_in_client, category='ingredients')
        rows = logged_in_client.get('/api/expenses?year=2024&category=fixed').get_json()
        assert [r['category'] for r in rows] == ['fixed']


class TestEditExpense:
    """Test editing expenses."""

    def test_partial_edit_keeps_other_fields(self, logged_in_client):
        expense = add_expense(logged_in_client)
        response = logged_in_client.put(f"/api/expenses/{expense['id']}", json={'notes': 'Two crates'})

        body = response.get_json()
        assert response.status_code == 200
        assert body['notes'] == 'Two crates'
        assert body['name'] == 'Milk'
        assert Decimal(body['amount']) == Decimal('250000')

    def test_changing_date_moves_period(self, logged_in_client):
        expense = add_expense(logged_in_client)
        response = logged_in_client.put(f"/api/expenses/{expense['id']}", json={'expenseDate': '2025-01-31'})

        body = response.get_json()
        assert body['year'] == 2025
        assert body['month'] == 1

    def test_edit_invalid_amount(self, logged_in_client):
        expense = add_expense(logged_in_client)
        response = logged_in_client.put(f"/api/expenses/{expense['id']}", json={'amount': '-500'})
        assert response.status_code == 400

    def test_edit_not_found(self, logged_in_client):
        response = logged_in_client.put('/api/expenses/999', json={'notes': 'x'})
        assert response.status_code == 404


class TestDeleteExpense:
    """Test deleting expenses."""

    def test_delete_expense(self, logged_in_client):
        expense = add_expense(logged_in_client)
        response = logged_in_client.delete(f"/api/expenses/{expense['id']}")
        assert response.status_code == 200
        assert logged_in_client.get('/api/expenses/2024').get_json() == []

    def test_delete_not_found(self, logged_in_client):
        response = logged_in_client.delete('/api/expenses/999')
        assert response.status_code == 404


class TestExpenseSummary:
    """Test the expense summary."""

    def test_summary(self, logged_in_client):
        add_expense(logged_in_client, amount='100', expenseDate='2024-02-10')
        add_expense(logged_in_client, amount='300', expenseDate='2024-03-10')

        summary = logged_in_client.get('/api/expenses/summary?year=2024&month=3').get_json()
        assert Decimal(summary['monthly']) == Decimal('300')
        assert Decimal(summary['annual']) == Decimal('400')
        assert Decimal(summary['monthlyChange']) == Decimal('200')
