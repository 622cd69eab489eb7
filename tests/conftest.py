# EasyMart test configuration
#
# The database lives in a temporary file created once per test run; every
# test starts from freshly created, empty tables.

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="easymart-tests-")
os.environ["DATABASE_PATH"] = os.path.join(_TMP_DIR, "pos.db")
os.environ["API_PREFIX"] = "/api"
os.environ["SEED_ON_STARTUP"] = "false"

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from easymart.core import limiter
from easymart.database import engine
from easymart.main import app
from easymart.sync.channel import BroadcastChannel


@pytest.fixture(autouse=True)
def fresh_state():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    limiter.reset()
    BroadcastChannel._registry.clear()
    yield
    BroadcastChannel._registry.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_product(client):
    """Create a product through the API and return its JSON."""
    counter = {"n": 0}

    def _make(**overrides) -> Dict[str, Any]:
        counter["n"] += 1
        body = {
            "name": f"Product {counter['n']}",
            "sku": f"SKU-{counter['n']:04d}",
            "category": "Snacks",
            "price": 10.0,
            "stock_quantity": 20,
            "reorder_level": 5,
        }
        body.update(overrides)
        response = client.post("/api/products", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_user(client):
    def _make(**overrides) -> Dict[str, Any]:
        body = {"username": "cashier1", "password": "pass123", "name": "John Doe"}
        body.update(overrides)
        response = client.post("/api/users", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
