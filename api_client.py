"""
Python client for the shop ledger REST API.

Reads are retried with exponential backoff; writes are sent exactly once
so a flaky connection never duplicates a revenue, expense or expenditure.
A 401 raises ``AuthError``, which callers treat as "go back to login".
"""

import logging
import time

import requests

from errors import (
    ApiError, AuthError, ConflictError, ForbiddenError, NotFoundError,
    TransportError, ValidationError,
)
from formatters import normalize_amount

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
AMOUNT_KEYS = ("amount", "unitPrice", "totalPrice")

_ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def normalize_payload(payload):
    """Replace display-formatted amounts with plain decimal strings."""
    normalized = dict(payload)
    for key in AMOUNT_KEYS:
        value = normalized.get(key)
        if value not in (None, ''):
            normalized[key] = str(normalize_amount(value))
    return normalized


def with_backoff(fn, attempts=MAX_ATTEMPTS, base_delay=0.5, sleep=None):
    """Call ``fn`` until it succeeds, retrying transport and server errors."""
    sleep = sleep or time.sleep
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except ApiError as exc:
            retryable = isinstance(exc, TransportError) or exc.status_code >= 500
            if not retryable or attempt == attempts:
                raise
            delay = base_delay * 2 ** (attempt - 1)
            logger.warning("Attempt %d failed (%s), retrying in %.1fs", attempt, exc.message, delay)
            sleep(delay)


class ShopLedgerClient:
    def __init__(self, base_url, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self._csrf_token = None

    # -- transport ---------------------------------------------------------

    def _send(self, method, path, **kwargs):
        try:
            response = self.session.request(method, self.base_url + path, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(str(exc))
        if response.status_code >= 400:
            raise self._error_for(response)
        return response.json()

    @staticmethod
    def _error_for(response):
        try:
            body = response.json()
        except ValueError:
            body = {}
        error_cls = _ERRORS_BY_STATUS.get(response.status_code, ApiError)
        error = error_cls(body.get("message"), body.get("errors"))
        error.status_code = response.status_code
        return error

    def _csrf(self):
        if self._csrf_token is None:
            self._csrf_token = self.get('/api/auth/csrf')['csrfToken']
        return self._csrf_token

    def get(self, path, params=None):
        return with_backoff(lambda: self._send('GET', path, params=params))

    def write(self, method, path, payload=None):
        headers = {'X-CSRFToken': self._csrf()}
        body = normalize_payload(payload) if payload is not None else None
        return self._send(method, path, json=body, headers=headers)

    # -- session -----------------------------------------------------------

    def login(self, phone, password):
        return self.write('POST', '/api/auth/login', {"phone": phone, "password": password})['user']

    def logout(self):
        result = self.write('POST', '/api/auth/logout')
        self._csrf_token = None
        return result

    def me(self):
        return self.get('/api/auth/me')['user']

    # -- revenue & expenses ------------------------------------------------

    def revenues(self, year):
        return self.get(f'/api/revenues/{year}')

    def save_revenue(self, year, month, amount):
        return self.write('POST', '/api/revenues', {"year": year, "month": month, "amount": amount})

    def expenses(self, year, month=None):
        params = {"year": year}
        if month:
            params["month"] = month
        return self.get('/api/expenses', params=params)

    def create_expense(self, **fields):
        return self.write('POST', '/api/expenses', fields)

    def update_expense(self, expense_id, **fields):
        return self.write('PUT', f'/api/expenses/{expense_id}', fields)

    def delete_expense(self, expense_id):
        return self.write('DELETE', f'/api/expenses/{expense_id}')

    # -- reserves ----------------------------------------------------------

    def reserve_summary(self, year):
        return self.get('/api/reserve-allocations/summary', params={"year": year})

    def expenditure_summary(self, year):
        return self.get(f'/api/reserve-expenditures/summary/{year}')

    def create_expenditure(self, **fields):
        return self.write('POST', '/api/reserve-expenditures', fields)

    def dashboard(self, year=None, month=None):
        params = {key: value for key, value in (("year", year), ("month", month)) if value}
        return self.get('/api/dashboard', params=params)
