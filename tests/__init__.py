"""
Shop Ledger Test Suite

- test_finance.py: Aggregation, allocation, reserve ledger and cash-flow folds
- test_formatters.py: Display amount parsing and formatting
- test_auth.py: Login, logout, profile, password change, user management
- test_revenues.py: Revenue upsert, listing and summaries
- test_expenses.py: Expense CRUD with date-derived periods
- test_reserves.py: Reserve allocations, expenditures and balances
- test_stock.py: Stock items, movements and price history
- test_settings.py: System settings, reference data and logo upload
- test_dashboard.py: Dashboard snapshot and cash-flow table
- test_security.py: CSRF, access control, headers and session settings
- test_api_client.py: REST client retries and error mapping

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_reserves.py
"""
