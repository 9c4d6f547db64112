"""Fixtures: TestClient over a fresh SQLite database per test, heuristic engine only."""
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Must be set before the app is imported
_DB_PATH = os.path.join(tempfile.gettempdir(), f"nuvra-test-{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["APP_ENV"] = "development"
os.environ["OPENAI_API_KEY"] = ""

from nuvra.main import app  # noqa: E402


def _remove_db():
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


@pytest.fixture(scope="function")
def client():
    """TestClient; the lifespan creates the tables and seeds the pipeline."""
    _remove_db()
    with TestClient(app) as c:
        yield c
    _remove_db()


@pytest.fixture
def register(client: TestClient):
    """Registers a user and returns (user_json, headers)."""

    def _register(name: str = "Maria Silva", phone: str = "11987654321", email: str = None):
        payload = {"name": name, "phone": phone}
        if email is not None:
            payload["email"] = email
        r = client.post("/users/register", json=payload)
        assert r.status_code == 200, r.text
        user = r.json()["user"]
        return user, {"X-User-Id": user["id"]}

    return _register
