"""
Pytest fixtures for agristock backend tests.

Provides an application with a fresh in-memory database per test, the
store session it loaded, and a test client.
"""

from datetime import datetime

import pytest

from agristock import create_app
from agristock.extensions import db
from agristock.services.persistence_service import KeyValueStore
from agristock.services.session_service import StoreSession, get_store_session


# Fixed wall clock for date-bucket tests: Monday 19 October 2026, 15:30 local
REFERENCE_TIME = datetime(2026, 10, 19, 15, 30)


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def store(app):
    return KeyValueStore()


@pytest.fixture(scope='function')
def session(app):
    """The process-wide session create_app() loaded."""
    return get_store_session()


@pytest.fixture(scope='function')
def reload_session(app):
    """Build a second session over the same storage, as a restart would."""
    def _reload() -> StoreSession:
        return StoreSession(
            stock_collection=app.config['STOCK_COLLECTION'],
            sales_collection=app.config['SALES_COLLECTION'],
        ).load()
    return _reload


def stock_input(**overrides) -> dict:
    """Add-stock form payload with string fields, as the form submits them."""
    data = {
        'name': 'Urea',
        'category': 'Nitrogen Fertilizer',
        'price': '300',
        'quantity': '100',
        'unit': 'kg',
        'min_stock': '10',
        'supplier': '',
        'how_to_use': 'Broadcast before irrigation.',
    }
    data.update(overrides)
    return data


def sale_input(**overrides) -> dict:
    """New-sale form payload."""
    data = {
        'fertilizer_name': 'Urea',
        'fertilizer_id': '',
        'price': '300',
        'quantity': '2',
        'unit': 'kg',
        'how_to_use': '',
        'sale_date': '2026-10-19',
        'customer_name': 'Ravi Kumar',
        'customer_phone': '9876543210',
        'customer_email': '',
        'customer_address': 'Village Road',
        'payment_method': 'Cash',
        'notes': '',
    }
    data.update(overrides)
    return data
