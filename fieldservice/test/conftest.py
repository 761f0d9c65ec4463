"""
Pytest configuration and fixtures

Each test gets a fresh application over its own SQLite file.
"""
import os
import tempfile

# The logger reads LOG_DIR the first time it is used, before any app exists
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='fieldservice-logs-'))
os.environ.setdefault('SECRET_KEY', 'test-secret-key')

import pytest  # noqa: E402

from fieldservice import create_app  # noqa: E402
from fieldservice import db as _db  # noqa: E402
from fieldservice.data.core.user_info.user import User, ROLE_ADMIN, ROLE_TECHNICIAN  # noqa: E402

ADMIN_PASSWORD = 'admin123456789'
TECH_PASSWORD = 'tech123456789'


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create Flask application for testing"""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'SQLALCHEMY_ENGINE_OPTIONS': {'connect_args': {'check_same_thread': False, 'timeout': 30}},
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'ENABLE_HTTPS': False,
        'FORCE_HTTPS_REDIRECT': False,
        'SESSION_COOKIE_SECURE': False,
        'REMEMBER_COOKIE_SECURE': False,
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()
        _db.engine.dispose()


@pytest.fixture(scope='function')
def db(app):
    return _db


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def admin_user(app):
    return User.create_from_dict({'username': 'admin', 'password': ADMIN_PASSWORD, 'role': ROLE_ADMIN})


@pytest.fixture(scope='function')
def technician_user(app):
    return User.create_from_dict({'username': 'tecnico', 'password': TECH_PASSWORD, 'role': ROLE_TECHNICIAN})


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    """Test client logged in as the administrator"""
    response = login_user(client, 'admin', ADMIN_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def technician_client(client, technician_user):
    """Test client logged in as a technician"""
    response = login_user(client, 'tecnico', TECH_PASSWORD)
    assert response.status_code == 200
    return client


def login_user(client, username='admin', password=ADMIN_PASSWORD):
    """Helper function to login a user"""
    return client.post('/login', json={
        'username': username,
        'password': password
    })
