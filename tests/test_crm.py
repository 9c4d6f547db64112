"""CRM: dashboard stats, lead list, details, qualification, pipeline and analytics."""
import pytest
from fastapi.testclient import TestClient


def _stage_id(client: TestClient, lead_id: str, name: str) -> str:
    stages = client.get(f"/crm/leads/{lead_id}").json()["stages"]
    return next(s["id"] for s in stages if s["name"] == name)


def test_empty_stats(client: TestClient):
    r = client.get("/crm/stats")
    assert r.status_code == 200
    assert r.json() == {"total_leads": 0, "qualified_leads": 0, "active_deals": 0, "conversion_rate": 0}


def test_new_user_enters_first_stage(client: TestClient, register):
    user, _ = register()
    lead = client.get(f"/crm/leads/{user['id']}").json()
    assert lead["qualification"]["stage_name"] == "Novo Lead"
    assert lead["qualification"]["source_name"] == "Site"
    assert [s["name"] for s in lead["stages"]] == [
        "Novo Lead", "Contato Inicial", "Qualificado", "Proposta Enviada", "Negociação", "Fechado",
    ]
    assert lead["interactions"] == []


def test_unknown_lead_is_404(client: TestClient):
    assert client.get("/crm/leads/nope").status_code == 404
    assert client.post("/crm/leads/nope/qualify").status_code == 404
    assert client.patch("/crm/leads/nope/qualification", json={"notes": "x"}).status_code == 404


def test_stage_change_records_interaction(client: TestClient, register):
    user, _ = register()
    negotiation = _stage_id(client, user["id"], "Negociação")

    r = client.patch(
        f"/crm/leads/{user['id']}/qualification",
        json={"stage_id": negotiation, "estimated_value": 1500, "company_name": "", "score": 80},
    )
    assert r.status_code == 200
    lead = r.json()
    assert lead["qualification"]["stage_name"] == "Negociação"
    assert lead["qualification"]["estimated_value"] == 1500
    assert lead["qualification"]["company_name"] is None
    assert lead["qualification"]["score"] == 80
    assert len(lead["interactions"]) == 1
    assert lead["interactions"][0]["subject"] == "Mudança de estágio"
    assert lead["interactions"][0]["description"] == "Lead movido para Negociação"
    assert lead["interactions"][0]["interaction_type"] == "other"


def test_update_without_stage_change_adds_no_interaction(client: TestClient, register):
    user, _ = register()
    r = client.patch(f"/crm/leads/{user['id']}/qualification", json={"notes": "Ligar na segunda"})
    assert r.status_code == 200
    assert r.json()["qualification"]["notes"] == "Ligar na segunda"
    assert r.json()["interactions"] == []


def test_update_with_unknown_stage(client: TestClient, register):
    user, _ = register()
    r = client.patch(f"/crm/leads/{user['id']}/qualification", json={"stage_id": "missing"})
    assert r.status_code == 422


def test_qualify_and_stats(client: TestClient, register):
    ana, _ = register(name="Ana", phone="11911111111")
    register(name="Bruno", phone="11922222222")

    r = client.post(f"/crm/leads/{ana['id']}/qualify")
    assert r.status_code == 200
    assert r.json()["is_qualified"] is True

    proposal = _stage_id(client, ana["id"], "Proposta Enviada")
    client.patch(f"/crm/leads/{ana['id']}/qualification", json={"stage_id": proposal})

    assert client.get("/crm/stats").json() == {
        "total_leads": 2,
        "qualified_leads": 1,
        "active_deals": 1,
        "conversion_rate": 50,
    }


def test_list_leads_search_and_filters(client: TestClient, register):
    ana, _ = register(name="Ana Souza", phone="11911111111", email="ana@empresa.com")
    bruno, _ = register(name="Bruno Lima", phone="21922222222")
    client.post(f"/crm/leads/{bruno['id']}/qualify")

    leads = client.get("/crm/leads").json()
    assert [lead["name"] for lead in leads] == ["Bruno Lima", "Ana Souza"]
    assert leads[1]["qualification"]["stage_name"] == "Novo Lead"

    assert [lead["id"] for lead in client.get("/crm/leads", params={"search": "souza"}).json()] == [ana["id"]]
    assert [lead["id"] for lead in client.get("/crm/leads", params={"search": "2192"}).json()] == [bruno["id"]]
    assert [lead["id"] for lead in client.get("/crm/leads", params={"search": "EMPRESA"}).json()] == [ana["id"]]

    qualified = client.get("/crm/leads", params={"stage": "qualified"}).json()
    assert [lead["id"] for lead in qualified] == [bruno["id"]]

    contact = _stage_id(client, ana["id"], "Contato Inicial")
    client.patch(f"/crm/leads/{ana['id']}/qualification", json={"stage_id": contact})
    in_contact = client.get("/crm/leads", params={"stage": "Contato Inicial"}).json()
    assert [lead["id"] for lead in in_contact] == [ana["id"]]

    assert client.get("/crm/leads", params={"search": "ninguém"}).json() == []


def test_pipeline_columns(client: TestClient, register):
    ana, _ = register(name="Ana", phone="11911111111")
    register(name="Bruno", phone="11922222222")

    negotiation = _stage_id(client, ana["id"], "Negociação")
    client.patch(
        f"/crm/leads/{ana['id']}/qualification",
        json={"stage_id": negotiation, "estimated_value": 2500.5, "score": 70},
    )

    columns = client.get("/crm/pipeline").json()
    assert [c["stage"]["name"] for c in columns][0] == "Novo Lead"
    by_name = {c["stage"]["name"]: c for c in columns}

    assert [lead["name"] for lead in by_name["Novo Lead"]["leads"]] == ["Bruno"]
    assert by_name["Novo Lead"]["total_value"] == 0
    assert by_name["Negociação"]["leads"][0]["score"] == 70
    assert by_name["Negociação"]["total_value"] == 2500.5
    assert by_name["Fechado"]["leads"] == []


def test_analytics(client: TestClient, register):
    ana, _ = register(name="Ana", phone="11911111111")
    register(name="Bruno", phone="11922222222")
    client.patch(f"/crm/leads/{ana['id']}/qualification", json={"score": 81})

    report = client.get("/crm/analytics").json()
    assert sum(day["count"] for day in report["leads_per_day"]) == 2
    assert report["top_sources"] == [{"name": "Site", "count": 2}]
    assert report["conversion_funnel"] == [{"stage": "Novo Lead", "count": 2, "color": "#3B82F6"}]
    # (81 + 0) / 2 = 40.5 rounds up
    assert report["average_score"] == 41


def test_empty_analytics(client: TestClient):
    report = client.get("/crm/analytics").json()
    assert report == {"leads_per_day": [], "top_sources": [], "conversion_funnel": [], "average_score": 0}


def test_null_required_fields_are_left_unchanged(client: TestClient, register):
    user, _ = register()
    client.patch(f"/crm/leads/{user['id']}/qualification", json={"score": 55, "interest_level": "alto"})

    for body in ({"interest_level": None}, {"score": None}, {"score": None, "interest_level": None, "notes": "ok"}):
        r = client.patch(f"/crm/leads/{user['id']}/qualification", json=body)
        assert r.status_code == 200, r.text
        assert r.json()["qualification"]["score"] == 55
        assert r.json()["qualification"]["interest_level"] == "alto"


@pytest.mark.parametrize("interest_level", ["", "altíssimo"])
def test_interest_level_vocabulary(client: TestClient, register, interest_level):
    user, _ = register()
    r = client.patch(
        f"/crm/leads/{user['id']}/qualification", json={"interest_level": interest_level}
    )
    assert r.status_code == 422
