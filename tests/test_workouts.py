import httpx

from liftplan.routers import workouts as workouts_router
from liftplan.schemas import ParsedWorkout
from conftest import login


def test_create_list_delete_workout(client):
    login(client)
    first = client.post("/api/workouts", json={"title": "  Upper   A ", "raw_input": "bench 3x8"})
    assert first.status_code == 201
    assert first.json()["title"] == "Upper A"
    second = client.post("/api/workouts", json={"title": "Lower A"}).json()

    rows = client.get("/api/workouts").json()
    assert [w["title"] for w in rows] == ["Lower A", "Upper A"]  # newest first

    r = client.delete(f"/api/workouts/{second['id']}")
    assert r.status_code == 204
    assert [w["title"] for w in client.get("/api/workouts").json()] == ["Upper A"]


def test_blank_title_rejected(client):
    login(client)
    r = client.post("/api/workouts", json={"title": "   "})
    assert r.status_code == 400


def test_planned_workout_cannot_be_deleted(client):
    login(client)
    w = client.post("/api/workouts", json={"title": "Legs"}).json()
    client.put("/api/planned/2024-06-13", json={"workout_id": w["id"]})
    r = client.delete(f"/api/workouts/{w['id']}")
    assert r.status_code == 409


def test_parse_uses_adapter(monkeypatch, client):
    login(client)

    async def fake_parse(raw_text: str):
        assert raw_text == "squat 3x5 @100kg"
        return ParsedWorkout(
            title="Squat Day",
            exercises=[{"name": "Squat", "sets": 3, "reps": 5, "weight": 100, "unit": "kg"}],
        )

    monkeypatch.setattr(workouts_router, "parse_workout", fake_parse)
    r = client.post("/api/workouts/parse", json={"raw_text": "squat 3x5 @100kg"})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Squat Day"
    assert body["exercises"][0]["sets"] == 3


def test_parse_handles_http_errors(monkeypatch, client):
    login(client)

    async def failing_parse(*args, **kwargs):
        raise httpx.HTTPError("boom")

    monkeypatch.setattr(workouts_router, "parse_workout", failing_parse)
    r = client.post("/api/workouts/parse", json={"raw_text": "row 4x10"})
    assert r.status_code == 502


def test_parse_rejects_blank_text(client):
    login(client)
    r = client.post("/api/workouts/parse", json={"raw_text": "   "})
    assert r.status_code == 400
