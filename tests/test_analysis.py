"""/analyze: quota gate, result variants and usage logging."""
import asyncio

from fastapi.testclient import TestClient
from sqlalchemy import select

from nuvra.core.database import async_session_maker
from nuvra.models import UsageLog


def _usage_logs(user_id: str):
    async def _fetch():
        async with async_session_maker() as session:
            result = await session.execute(
                select(UsageLog).where(UsageLog.user_id == user_id).order_by(UsageLog.created_at)
            )
            return result.scalars().all()

    return asyncio.run(_fetch())


def test_analyze_requires_session(client: TestClient):
    r = client.post("/analyze", json={"text": "Compre agora"})
    assert r.status_code == 401


def test_analyze_rejects_blank_text(client: TestClient, register):
    _, headers = register()
    r = client.post("/analyze", json={"text": "   "}, headers=headers)
    assert r.status_code == 422


def test_analyze_marketing_text(client: TestClient, register):
    _, headers = register()
    text = (
        "Compre agora nosso produto revolucionário, garantido para milhares de "
        "clientes satisfeitos! Acesse e aproveite."
    )
    r = client.post("/analyze", json={"text": text}, headers=headers)
    assert r.status_code == 200
    j = r.json()
    assert j["analysis_type"] == "marketing"
    assert j["remaining_uses"] == 9
    assert j["result"]["kind"] == "structured"
    assert j["result"]["score"] == 80
    assert j["result"]["optimized_text"] == text


def test_analyze_code_is_raw_and_logged_as_code(client: TestClient, register):
    user, headers = register()
    r = client.post("/analyze", json={"text": "const soma = (a, b) => a + b"}, headers=headers)
    assert r.status_code == 200
    j = r.json()
    assert j["result"]["kind"] == "raw"
    assert j["analysis_type"] == "code"

    logs = _usage_logs(user["id"])
    assert [log.analysis_type for log in logs] == ["code"]


def test_usage_counter_is_incremented(client: TestClient, register):
    _, headers = register()
    for _ in range(3):
        client.post("/analyze", json={"text": "oi"}, headers=headers)

    r = client.get("/users/me", headers=headers)
    assert r.json()["user"]["total_uses"] == 3
    assert r.json()["remaining_uses"] == 7


def test_logged_input_is_truncated(client: TestClient, register):
    user, headers = register()
    text = "palavra " * 100
    r = client.post("/analyze", json={"text": text}, headers=headers)
    assert r.status_code == 200

    logs = _usage_logs(user["id"])
    assert len(logs) == 1
    assert logs[0].input_text == text[:500]
    assert logs[0].analysis_type == "marketing"


def test_quota_exhausted_returns_402(client: TestClient, register):
    _, headers = register()
    for i in range(10):
        r = client.post("/analyze", json={"text": "oi"}, headers=headers)
        assert r.status_code == 200, f"Request {i + 1} should be 200"

    r = client.post("/analyze", json={"text": "oi"}, headers=headers)
    assert r.status_code == 402
    detail = r.json()["detail"]
    assert detail["used"] == 10
    assert detail["upgrade_url"].startswith("https://wa.me/")

    me = client.get("/users/me", headers=headers).json()
    assert me["user"]["total_uses"] == 10
    assert me["can_use"] is False
