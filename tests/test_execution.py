import pytest

from liftplan.client.domain import DayState
from liftplan.client.errors import ValidationFailure
from liftplan.client.execution import (
    ExecutionSession,
    FinishOutcome,
    materialize,
    parse_reps,
    parse_weight,
)
from liftplan.client.timer import RestTimer
from conftest import TODAY

SQUAT = {"name": "Squat", "sets": 3, "reps": 10, "weight": 50, "unit": "kg"}
PLANK = {"name": "Plank"}


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def planned(planner, make_workout):
    w = make_workout("Legs", exercises=[SQUAT, PLANK])
    planner.load_week()
    return planner.assign(w.id, TODAY)


@pytest.fixture
def session(planner, planned):
    s = ExecutionSession(planner, timer=RestTimer(ticker=lambda cb: FakeHandle()))
    return s


def _snapshot(entry):
    return (entry.reps, entry.weight, entry.completed)


def test_materialize_merges_logs_with_prescription(session, planned):
    session.remote.upsert_log(planned.id, "Squat", 2, 8, 45.0, True)
    session.load("2024-06-13")

    squat = session.entries_for("Squat")
    assert [_snapshot(e) for e in squat] == [
        ("10", "50", False),
        ("8", "45", True),
        ("10", "50", False),
    ]
    # no prescribed sets means one set, no prescribed values means blank fields
    assert [_snapshot(e) for e in session.entries_for("Plank")] == [("", "", False)]


def test_materialize_without_exercises():
    assert materialize([], []) == {}


@pytest.mark.parametrize("token", ["2024-6-13", "13/06/2024", "", "2024-13-01"])
def test_load_rejects_malformed_date(session, token):
    calls = len(session.remote.calls)
    with pytest.raises(ValidationFailure) as exc:
        session.load(token)
    assert "Invalid date" in exc.value.message
    assert len(session.remote.calls) == calls


def test_load_reports_nothing_planned(session):
    with pytest.raises(ValidationFailure) as exc:
        session.load("2024-06-14")
    assert exc.value.message == "No workout planned for this date."


def test_toggle_persists_current_values(session, planned):
    session.load("2024-06-13")
    session.edit_field("Squat", 1, "reps", "12")
    entry = session.toggle_set("Squat", 1)

    assert entry.completed is True
    assert entry.save_error is None
    logs = session.remote.list_logs(planned.id)
    assert [(l.exercise_name, l.set_number, l.reps_completed, l.weight, l.is_completed) for l in logs] == [
        ("Squat", 1, 12, 50.0, True),
    ]


def test_untoggle_keeps_row_and_marks_it_not_completed(session, planned):
    session.load("2024-06-13")
    session.toggle_set("Squat", 1)
    entry = session.toggle_set("Squat", 1)

    assert entry.completed is False
    logs = session.remote.list_logs(planned.id)
    assert len(logs) == 1
    assert logs[0].is_completed is False

    # a fresh load agrees with the local flag
    again = ExecutionSession(session.planner, timer=RestTimer(ticker=lambda cb: FakeHandle()))
    again.load("2024-06-13")
    assert again.entries[("Squat", 1)].completed is False
    assert again.entries[("Squat", 1)].reps == "10"


def test_edit_field_does_not_persist_until_blur(session, planned):
    session.load("2024-06-13")
    calls = len(session.remote.calls)
    session.edit_field("Squat", 3, "weight", "52.5")
    assert len(session.remote.calls) == calls

    entry = session.save_on_blur("Squat", 3)
    assert entry.saving is False
    [log] = session.remote.list_logs(planned.id)
    assert (log.set_number, log.weight, log.is_completed) == (3, 52.5, False)


def test_empty_and_junk_fields_persist_as_absent(session, planned):
    session.load("2024-06-13")
    session.edit_field("Squat", 1, "reps", "")
    session.edit_field("Squat", 1, "weight", "heavy")
    session.toggle_set("Squat", 1)
    [log] = session.remote.list_logs(planned.id)
    assert log.reps_completed is None
    assert log.weight is None


def test_failed_save_is_isolated_to_its_set(session, planned):
    session.load("2024-06-13")
    session.toggle_set("Squat", 1)

    session.remote.fail_when = (
        lambda method, url, kw: url == "/api/logs" and method == "PUT" and kw["json"]["set_number"] == 2
    )
    failed = session.toggle_set("Squat", 2)
    ok = session.toggle_set("Squat", 3)

    assert failed.completed is False
    assert failed.save_error == "Network error: simulated"
    assert failed.saving is False
    assert ok.completed is True and ok.save_error is None
    assert session.entries[("Squat", 1)].completed is True
    assert session.entries[("Squat", 1)].save_error is None

    # editing clears the error; a retry goes through
    session.remote.fail_when = None
    session.edit_field("Squat", 2, "reps", "9")
    assert failed.save_error is None
    assert session.toggle_set("Squat", 2).completed is True


def test_unknown_set_rejected(session):
    session.load("2024-06-13")
    with pytest.raises(ValidationFailure):
        session.toggle_set("Squat", 4)


def test_finish_with_nothing_logged_needs_confirmation(session, planner):
    session.load("2024-06-13")
    calls = len(session.remote.calls)

    assert session.finish() is FinishOutcome.needs_confirmation
    assert session.finish(confirm=lambda: False) is FinishOutcome.cancelled
    assert len(session.remote.calls) == calls
    assert planner.state_of(TODAY) is DayState.planned

    assert session.finish(confirm=lambda: True) is FinishOutcome.finished
    assert planner.state_of(TODAY) is DayState.completed
    assert session.closed


def test_finish_with_a_logged_set_is_immediate(session, planner):
    session.load("2024-06-13")
    session.timer.start()
    session.toggle_set("Squat", 1)

    asked = []
    outcome = session.finish(confirm=lambda: asked.append(True) or True)

    assert outcome is FinishOutcome.finished
    assert asked == []
    assert planner.remote.get_planned(TODAY).is_completed is True
    assert session.timer.running is False


def test_finished_session_rejects_further_set_writes(session, planner):
    session.load("2024-06-13")
    session.toggle_set("Squat", 1)
    assert session.finish() is FinishOutcome.finished
    assert session.closed and session.planned.is_completed
    calls = len(session.remote.calls)

    with pytest.raises(ValidationFailure):
        session.toggle_set("Squat", 2)
    with pytest.raises(ValidationFailure):
        session.edit_field("Squat", 1, "reps", "12")
    with pytest.raises(ValidationFailure):
        session.save_on_blur("Squat", 1)

    assert len(session.remote.calls) == calls
    assert session.entries[("Squat", 2)].completed is False
    assert session.entries[("Squat", 1)].reps == "10"
    logs = planner.remote.list_logs(session.planned.id)
    assert [(l.set_number, l.is_completed) for l in logs] == [(1, True)]


def test_loading_a_completed_day_is_read_only(session, planner):
    planner.finish(TODAY)
    session.load("2024-06-13")
    with pytest.raises(ValidationFailure):
        session.toggle_set("Squat", 1)


@pytest.mark.parametrize(
    "raw, reps, weight",
    [("10", 10, 10.0), (" 8 ", 8, 8.0), ("7.5", 7, 7.5), ("", None, None), ("abc", None, None), ("nan", None, None)],
)
def test_field_parsing(raw, reps, weight):
    assert parse_reps(raw) == reps
    assert parse_weight(raw) == weight
