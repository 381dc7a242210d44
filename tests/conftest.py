import os

# Settings are read once on first import, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["SEED_DATA"] = "false"

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from inventory.main import app
from inventory.database import Base, engine, SessionLocal
from inventory.utils.cache import cache_service


class InMemoryRedis:
    """Minimal stand-in for the redis client methods the cache service calls."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    def ping(self):
        return True

    def info(self):
        return {"connected_clients": 1, "used_memory_human": "1K", "uptime_in_seconds": 1}

    def dbsize(self):
        return len(self.store)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Keep tests independent of a running Redis server."""
    fake = InMemoryRedis()
    monkeypatch.setattr(cache_service, "client", fake)
    return fake


@pytest.fixture(autouse=True)
def low_stock_task():
    """Mock Celery dispatch so no broker is needed."""
    with patch("inventory.api.products.notify_low_stock.delay") as delay:
        yield delay


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def category_id(client):
    """Create the 'Electrónica' category and return its ID."""
    response = client.post("/api/categorias", json={"nombre": "Electrónica"})
    return response.json()["id"]


@pytest.fixture
def create_product(client, category_id):
    """Return a helper that creates a product through the API."""
    def _create(nombre="Mouse", cantidad=5, descripcion=None, categoria_id=None):
        return client.post(
            "/api/productos",
            json={
                "nombre": nombre,
                "cantidad": cantidad,
                "descripcion": descripcion,
                "categoria_id": categoria_id or category_id,
            }
        )
    return _create
