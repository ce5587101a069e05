"""
Pytest fixtures for ORION POS backend tests.

Provides the Flask app on in-memory SQLite, a clean database per test,
the test client, and in-memory service graphs seeded with the demo catalog.
"""

from decimal import Decimal

import pytest

from orionpos import create_app
from orionpos.config import TestConfig
from orionpos.domain import Client, Product
from orionpos.extensions import db
from orionpos.services import build_services, memory_services, sql_services
from orionpos.services.seed_service import seed_defaults


MILK_ID = "7891000315507"
RICE_ID = "7891910000197"
COFFEE_ID = "7891149410116"


def config_dict(cls=TestConfig) -> dict:
    return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}


def demo_products() -> list[Product]:
    return [
        Product(
            id=MILK_ID,
            scan_code=MILK_ID,
            name="Whole Milk",
            group="Dairy",
            brand="Ninho",
            unit_price=Decimal("5.99"),
            stock_quantity=50,
            stock_minimum=10,
        ),
        Product(
            id=RICE_ID,
            scan_code=RICE_ID,
            name="Rice",
            group="Grains",
            brand="Tio Joao",
            unit_price=Decimal("22.90"),
            stock_quantity=35,
            stock_minimum=5,
        ),
        Product(
            id=COFFEE_ID,
            scan_code=COFFEE_ID,
            name="Ground Coffee",
            group="Beverages",
            brand="Pilao",
            unit_price=Decimal("15.75"),
            stock_quantity=28,
            stock_minimum=8,
        ),
    ]


def demo_clients() -> list[Client]:
    return [
        Client(id="1", name="Final Consumer"),
        Client(id="2", name="Maria Silva", document="123.456.789-00", city="Sao Paulo"),
    ]


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


@pytest.fixture(scope='function')
def sql_pos(app, db_session):
    """SQL-backed services with the demo catalog loaded through the ledger."""
    services = sql_services(db_session, app.config)
    seed_defaults(services.catalog, default_client_id="1", demo=True)
    return services


@pytest.fixture(scope='function')
def seeded(sql_pos):
    """Alias used by HTTP and CLI tests that only need the data present."""
    return sql_pos


@pytest.fixture(scope='function')
def pos():
    """In-memory services seeded with milk, rice and coffee plus two clients."""
    return memory_services(demo_products(), demo_clients(), config=config_dict())


@pytest.fixture(scope='function')
def build_pos():
    """Factory for in-memory services with selected repositories swapped out."""
    from orionpos.repositories import (
        InMemoryCartRepository,
        InMemoryClientRepository,
        InMemoryProductRepository,
        InMemorySaleRepository,
        InMemoryStockMovementRepository,
    )

    def _build(**overrides):
        repos = {
            "products": InMemoryProductRepository(demo_products()),
            "clients": InMemoryClientRepository(demo_clients()),
            "sales": InMemorySaleRepository(),
            "movements": InMemoryStockMovementRepository(),
            "cart": InMemoryCartRepository(),
        }
        repos.update(overrides)
        return build_services(config=config_dict(), **repos)

    return _build
