import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# Must point at a throwaway database before pocketguard is imported
TEST_DB = Path(tempfile.gettempdir()) / f"pocketguard-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB}"

from fastapi.testclient import TestClient  # noqa: E402

from pocketguard.config import settings  # noqa: E402
from pocketguard.main import app  # noqa: E402

FROZEN_NOW = datetime(2024, 3, 10, 12, 0, 0)


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch):
    """Pin "today" to 10 March 2024 so period maths is predictable."""
    monkeypatch.setattr(settings, "MOCK_NOW", FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture
def client():
    """
    A fresh database per test: the file is removed, then startup recreates
    the schema and seeds the question bank.
    """
    if TEST_DB.exists():
        TEST_DB.unlink()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    if TEST_DB.exists():
        TEST_DB.unlink()


def register(c, username="asha", password="secret123", name="Asha"):
    res = c.post("/api/register", json={"username": username, "password": password, "name": name})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def categories(client, user):
    res = client.get("/api/categories")
    assert res.status_code == 200
    return {c["name"]: c["id"] for c in res.json()}


@pytest.fixture
def food_budget(client, categories):
    """March 2024 budget: 5000 total, Food 1000, Shopping 500."""
    res = client.post("/api/budgets", json={
        "totalAmount": 5000,
        "month": 3,
        "year": 2024,
        "categories": [
            {"categoryId": categories["Food"], "amount": 1000},
            {"categoryId": categories["Shopping"], "amount": 500},
        ],
    })
    assert res.status_code == 201, res.text
    return res.json()


def add_expense(c, category_id, amount, is_upi=False, date="2024-03-05T10:00:00", note=None):
    body = {"amount": amount, "categoryId": category_id, "date": date, "isUPI": is_upi}
    if note is not None:
        body["note"] = note
    return c.post("/api/expenses", json=body)
