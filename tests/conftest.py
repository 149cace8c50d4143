"""
Shared pytest fixtures for Shop Ledger tests.
"""

import os
import sys

import pytest

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models import db  # noqa: E402
from storage import create_user  # noqa: E402

ADMIN_PASSWORD = 'admin-password'
USER_PASSWORD = 'user-password'


class TestConfig:
    """Test configuration backed by in-memory SQLite."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOG_LEVEL = 'WARNING'
    UPLOAD_FOLDER = '/tmp/test_uploads'
    LOGO_FOLDER = '/tmp/test_uploads/logos'
    ALLOWED_LOGO_EXT = {"png", "jpg", "jpeg", "svg"}
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    DEFAULT_ADMIN_PHONE = '0900000000'
    DEFAULT_ADMIN_PASSWORD = ADMIN_PASSWORD

    @staticmethod
    def init_db(app):
        db.init_app(app)


def _build_app(csrf_enabled):
    from app import create_app
    application = create_app(config_class=TestConfig)
    application.config['WTF_CSRF_ENABLED'] = csrf_enabled
    with application.app_context():
        db.create_all()
        create_user({
            'phone': '0900000001', 'username': 'admin', 'name': 'Admin User',
            'password': ADMIN_PASSWORD, 'role': 'admin',
        })
        create_user({
            'phone': '0900000002', 'username': 'staff', 'name': 'Staff User',
            'password': USER_PASSWORD, 'role': 'user',
        })
    return application


@pytest.fixture
def app():
    """Create application for testing."""
    yield _build_app(csrf_enabled=True)


@pytest.fixture
def app_no_csrf():
    """Create application for testing without CSRF protection."""
    yield _build_app(csrf_enabled=False)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


def login_session(client, user_id=1, user_name='Admin User'):
    """Helper to set up a logged-in session."""
    with client.session_transaction() as sess:
        sess['user_id'] = user_id
        sess['user_name'] = user_name


@pytest.fixture
def logged_in_client(client_no_csrf):
    """Client with an administrator session."""
    login_session(client_no_csrf)
    return client_no_csrf


@pytest.fixture
def staff_client(client_no_csrf):
    """Client with a non-admin session."""
    login_session(client_no_csrf, user_id=2, user_name='Staff User')
    return client_no_csrf


@pytest.fixture
def csrf_token(client):
    """Log in and fetch a CSRF token bound to the client's session."""
    login_session(client)
    return client.get('/api/auth/csrf').get_json()['csrfToken']
