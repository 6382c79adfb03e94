"""
Fixtures for API integration tests.
Uses FastAPI's TestClient against the real app with get_db pointed at
the per-test in-memory database.
"""
import pytest
from fastapi.testclient import TestClient

from shelfsync.main import app
from shelfsync.dependencies import get_db


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def warehouse(client):
    """Factory: creates a warehouse through the API and returns its JSON."""
    def _make(name="Main", capacity=100):
        r = client.post("/warehouse", json={"name": name, "maximumCapacityCubicFeet": capacity})
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def item(client):
    counter = {"n": 0}

    def _make(cubic_feet=10, sku=None, name=None):
        counter["n"] += 1
        r = client.post("/item", json={
            "sku": sku or f"SKU-{counter['n']:03d}",
            "name": name or f"Game {counter['n']}",
            "weightLbs": 1.25,
            "cubicFeet": cubic_feet,
        })
        assert r.status_code == 201, r.text
        return r.json()
    return _make
