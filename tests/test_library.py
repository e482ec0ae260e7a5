import pytest

from liftplan.client.errors import NotAuthenticated, RemoteFailure, ValidationFailure
from liftplan.client.library import create_from_text
from liftplan.client.remote import RemoteStore
from liftplan.routers import workouts as workouts_router
from liftplan.schemas import ParsedWorkout


@pytest.fixture
def fake_parse(monkeypatch):
    async def _parse(raw_text: str):
        return ParsedWorkout(
            title="Pull Day",
            category="strength",
            muscle_groups=["back"],
            exercises=[{"name": "Row", "sets": 4, "reps": 10, "weight": 40}],
        )

    monkeypatch.setattr(workouts_router, "parse_workout", _parse)


def test_create_from_text_saves_parsed_structure(remote, fake_parse):
    w = create_from_text(remote, "  rows 4x10 @40  ")
    assert w.title == "Pull Day"
    assert w.raw_input == "rows 4x10 @40"
    assert w.structured_json["exercises"][0]["name"] == "Row"
    assert [x.id for x in remote.list_workouts()] == [w.id]


def test_create_from_text_title_override(remote, fake_parse):
    assert create_from_text(remote, "rows", title=" Back  Day ").title == "Back Day"


def test_blank_text_rejected_before_parsing(remote):
    with pytest.raises(ValidationFailure):
        create_from_text(remote, "   ")
    assert remote.calls == []


def test_writes_without_session_raise_not_authenticated(client):
    store = RemoteStore(client)
    assert store.list_workouts() == []
    with pytest.raises(NotAuthenticated):
        store.insert_workout("X", "", {})


def test_server_detail_becomes_message(remote):
    with pytest.raises(RemoteFailure) as exc:
        remote.delete_workout(99999)
    assert exc.value.message == "workout not found"
    assert exc.value.status_code == 404
