"""
Pytest fixtures for stockdesk backend tests.

Provides test database setup, one user per role, a stocked product and
authenticated request headers.
"""

import pytest

from stockdesk import create_app
from stockdesk.config import TestConfig
from stockdesk.extensions import db
from stockdesk.models import Product, User, Expense
from stockdesk.services.auth_service import hash_password
from stockdesk.time_utils import utcnow


DEFAULT_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()
        db.session.expire_all()


def _make_user(db_session, email: str, name: str, role: str) -> User:
    user = User(
        email=email,
        name=name,
        role=role,
        password_hash=hash_password(DEFAULT_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(db_session):
    return _make_user(db_session, "admin@inventory.com", "Admin User", "admin")


@pytest.fixture(scope='function')
def manager_user(db_session):
    return _make_user(db_session, "manager@inventory.com", "Manager User", "manager")


@pytest.fixture(scope='function')
def salesgirl_user(db_session):
    return _make_user(db_session, "sales@inventory.com", "Sales User", "salesgirl")


@pytest.fixture(scope='function')
def laptop(db_session):
    """Laptop: 15 in stock at 1200.00, reorder at 5."""
    product = Product(
        name="Laptop",
        sku="LAP-001",
        category="Electronics",
        quantity=15,
        reorder_level=5,
        price_cents=120000,
        cost_cents=80000,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def mouse(db_session):
    """Mouse: 3 in stock at 25.00, reorder at 10 (already low)."""
    product = Product(
        name="Mouse",
        sku="MOU-001",
        category="Accessories",
        quantity=3,
        reorder_level=10,
        price_cents=2500,
        cost_cents=1000,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def rent_expense(db_session, admin_user):
    expense = Expense(
        description="October rent",
        amount_cents=50000,
        category="Rent",
        incurred_at=utcnow(),
        created_by_user_id=admin_user.id,
    )
    db_session.add(expense)
    db_session.commit()
    return expense


def get_auth_token(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.get_json().get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.email))


@pytest.fixture(scope='function')
def manager_headers(client, manager_user):
    return auth_headers(get_auth_token(client, manager_user.email))


@pytest.fixture(scope='function')
def salesgirl_headers(client, salesgirl_user):
    return auth_headers(get_auth_token(client, salesgirl_user.email))
