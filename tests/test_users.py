"""Registration, session restore and logout."""
from fastapi.testclient import TestClient


def test_register_creates_free_user(client: TestClient):
    r = client.post(
        "/users/register",
        json={"name": "  Maria Silva ", "phone": "(11) 98765-4321", "email": "maria@exemplo.com.br"},
    )
    assert r.status_code == 200
    j = r.json()
    assert j["user"]["name"] == "Maria Silva"
    assert j["user"]["phone"] == "11987654321"
    assert j["user"]["subscription_status"] == "free"
    assert j["user"]["total_uses"] == 0
    assert j["remaining_uses"] == 10
    assert j["can_use"] is True


def test_register_same_phone_returns_existing(client: TestClient, register):
    first, _ = register(name="Maria", phone="11987654321")
    r = client.post("/users/register", json={"name": "Outra Pessoa", "phone": "11 98765 4321"})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == first["id"]
    assert r.json()["user"]["name"] == "Maria"


def test_register_blank_email_is_null(client: TestClient):
    r = client.post("/users/register", json={"name": "João", "phone": "21999998888", "email": "  "})
    assert r.status_code == 200
    assert r.json()["user"]["email"] is None


def test_register_validation(client: TestClient):
    r = client.post("/users/register", json={"name": "", "phone": "11987654321"})
    assert r.status_code == 422

    r = client.post("/users/register", json={"name": "Ana", "phone": "123-456"})
    assert r.status_code == 422


def test_me_requires_session(client: TestClient):
    r = client.get("/users/me")
    assert r.status_code == 401


def test_me_with_dangling_id(client: TestClient):
    r = client.get("/users/me", headers={"X-User-Id": "does-not-exist"})
    assert r.status_code == 401


def test_me_restores_session(client: TestClient, register):
    user, headers = register()
    r = client.get("/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["user"]["id"] == user["id"]


def test_logout(client: TestClient, register):
    _, headers = register()
    r = client.post("/users/logout", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
