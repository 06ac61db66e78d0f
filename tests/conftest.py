"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'spacebooking_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

# Seeded spaces (database/seed.py)
DESK_ID = 1          # capacity 1, min 1
MEETING_ROOM_ID = 2  # capacity 4, min 2
LAB_ID = 3           # capacity 12, min 3

PASSWORD = 'secret123'


@pytest.fixture
def app(tmp_path):
    """
    Create test application with a fresh database file per test.

    The app context is NOT kept pushed: requests made through the test
    client must get their own context so that `g` (connection, logged in
    user, cached permissions) does not leak between requests.
    """
    from app import create_app
    from database import init_db

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = str(tmp_path / 'spacebooking_test.db')

    with app.app_context():
        init_db()

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory creating users with a role; returns the new user ID."""
    counter = {'n': 0}

    def _make_user(role='student', name=None, email=None):
        from models.user import create_user
        from models.role import get_role_by_name

        counter['n'] += 1
        n = counter['n']
        with app.app_context():
            return create_user(
                name=name or f'{role.title()} {n}',
                email=email or f'{role}{n}@example.com',
                password=PASSWORD,
                role_id=get_role_by_name(role)['id']
            )

    return _make_user


def login(client, email, password=PASSWORD):
    """Log a test client in through the JSON endpoint."""
    return client.post('/login', json={'email': email, 'password': password})


@pytest.fixture
def student_client(app, make_user):
    """Test client logged in as a fresh student."""
    user_id = make_user('student', email='student@example.com')
    client = app.test_client()
    response = login(client, 'student@example.com')
    assert response.status_code == 200
    client.user_id = user_id
    return client


@pytest.fixture
def admin_client(app):
    """Test client logged in as the seeded admin."""
    client = app.test_client()
    response = login(client, 'admin@example.com', 'admin123')
    assert response.status_code == 200
    return client
