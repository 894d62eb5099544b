"""
Pytest configuration and fixtures.
Each test gets its own SQLite file with a freshly created schema.
"""

import os
import pytest


def _create_test_app(db_path):
    from app import create_app
    from database import init_db

    app = create_app('test')
    app.config['DATABASE_PATH'] = str(db_path)

    with app.app_context():
        init_db()
    return app


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['FLASK_ENV'] = 'test'
    yield


@pytest.fixture
def app(tmp_path):
    """Create test application with isolated database and an active app context."""
    app = _create_test_app(tmp_path / 'shareit_test.db')

    with app.app_context():
        yield app


@pytest.fixture
def client(tmp_path):
    """
    Create test client.

    Uses its own application without a pushed app context, so every request
    gets a fresh context (and a freshly resolved caller).
    """
    app = _create_test_app(tmp_path / 'shareit_http.db')
    return app.test_client()


# =============================================================================
# RECORD FACTORIES
# =============================================================================

@pytest.fixture
def make_user(app):
    """Create users with unique emails."""
    from models.user import create_user

    counter = {'n': 0}

    def _make_user(name=None, email=None):
        counter['n'] += 1
        n = counter['n']
        return create_user(name or f'User {n}', email or f'user{n}@example.com')

    return _make_user


@pytest.fixture
def make_item(app):
    """Create items for a given owner."""
    from models.item import create_item

    def _make_item(owner_id, name='Drill', description='Cordless drill', available=True,
                   request_id=None):
        return create_item(owner_id, name, description, available, request_id)

    return _make_item


@pytest.fixture
def make_booking(app):
    """
    Store a booking directly with any status and window.

    Bypasses the lifecycle checks so tests can lay out past and approved
    bookings; the storage trigger still applies.
    """
    from database import get_db, begin_immediate
    from models.booking import BookingStatus, insert_booking, get_booking_by_id

    def _make_booking(item_id, booker_id, start, end, status=BookingStatus.WAITING):
        db = get_db()
        try:
            cursor = begin_immediate(db)
            booking_id = insert_booking(cursor, item_id, booker_id, start, end, status)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return get_booking_by_id(booking_id)

    return _make_booking


@pytest.fixture
def sharing(make_user, make_item):
    """An owner with one available item and a second user who books it."""
    owner = make_user('Owner', 'owner@example.com')
    booker = make_user('Booker', 'booker@example.com')
    item = make_item(owner['id'])
    return {'owner': owner, 'booker': booker, 'item': item}
