import datetime

import pytest


@pytest.mark.asyncio
async def test_public_content_hides_gate_answers(client):
    resp = await client.get("/api/content/")
    assert resp.status_code == 200
    questions = resp.json()["gate"]["questions"]
    assert questions
    assert all("answer_index" not in q and "answer_text" not in q for q in questions)


@pytest.mark.asyncio
async def test_gate_accepts_correct_answers_only(client):
    ok = await client.post("/api/content/gate", json={"answers": [1, "Pizza"]})
    assert ok.status_code == 200
    assert ok.json() == {"passed": True}

    wrong = await client.post("/api/content/gate", json={"answers": [2, "Pizza"]})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Noch nicht korrekt. Versuch es erneut."


@pytest.mark.asyncio
async def test_gate_honours_env_overrides(client, monkeypatch):
    monkeypatch.setenv("LOVE_GATE_ERROR_MESSAGE", "Leider falsch")
    resp = await client.post("/api/content/gate", json={"answers": []})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Leider falsch"


@pytest.mark.asyncio
async def test_relationship_counts_days(client, monkeypatch):
    start = datetime.date.today() - datetime.timedelta(days=30)
    monkeypatch.setenv("LOVE_REL_START_DATE", start.isoformat())
    resp = await client.get("/api/content/relationship")
    assert resp.json() == {"start_date": start.isoformat(), "days_together": 30}


@pytest.mark.asyncio
async def test_export_downloads_config(client):
    resp = await client.get("/api/content/export")
    assert resp.status_code == 200
    assert "attachment" in resp.headers["content-disposition"]
    assert resp.json()["gate"]["questions"][0]["answerIndex"] == 1
