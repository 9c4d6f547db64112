"""/chat: canned replies, usage accounting and the free limit."""
from fastapi.testclient import TestClient

from nuvra.services.heuristics import CHAT_GREETING, CHAT_LIMIT_MESSAGE


def test_greeting(client: TestClient):
    r = client.get("/chat/greeting")
    assert r.status_code == 200
    assert r.json()["message"] == CHAT_GREETING


def test_chat_requires_session(client: TestClient):
    r = client.post("/chat", json={"message": "oi"})
    assert r.status_code == 401


def test_chat_conversion_reply(client: TestClient, register):
    _, headers = register()
    r = client.post(
        "/chat",
        json={
            "history": [{"role": "assistant", "content": CHAT_GREETING}],
            "message": "Como melhorar minha conversão?",
        },
        headers=headers,
    )
    assert r.status_code == 200
    j = r.json()
    assert j["message"].startswith("Para melhorar conversão:")
    assert j["limit_reached"] is False
    assert j["remaining_uses"] == 9


def test_chat_limit_message_after_quota(client: TestClient, register):
    _, headers = register()
    for _ in range(10):
        assert client.post("/chat", json={"message": "Bom dia"}, headers=headers).status_code == 200

    r = client.post("/chat", json={"message": "Bom dia"}, headers=headers)
    assert r.status_code == 200
    j = r.json()
    assert j["limit_reached"] is True
    assert j["message"] == CHAT_LIMIT_MESSAGE

    me = client.get("/users/me", headers=headers).json()
    assert me["user"]["total_uses"] == 10
