from __future__ import annotations
from typing import Any, List, Optional
import datetime as dt
import logging

import httpx

from ..schemas import (
    ParsedWorkout,
    PlannedWorkoutRead,
    WorkoutLogRead,
    WorkoutRead,
)
from .errors import NotAuthenticated, RemoteFailure

logger = logging.getLogger(__name__)


def _detail(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text or f"HTTP {r.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if detail:
        return str(detail)
    return f"HTTP {r.status_code}"


class RemoteStore:
    """
    Row-oriented view of the API. Every call is scoped to whatever session
    cookie ``http`` carries; a ``fastapi.testclient.TestClient`` works too.
    """

    def __init__(self, http: httpx.Client):
        self.http = http

    def _call(self, method: str, url: str, **kwargs) -> Any:
        try:
            r = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise RemoteFailure(f"Network error: {e!s}") from e
        if r.status_code == 401:
            raise NotAuthenticated(_detail(r))
        if r.status_code >= 400:
            logger.warning("%s %s -> %s", method, url, r.status_code)
            raise RemoteFailure(_detail(r), status_code=r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    # ---------- Workouts ----------
    def list_workouts(self) -> List[WorkoutRead]:
        return [WorkoutRead.model_validate(w) for w in self._call("GET", "/api/workouts")]

    def insert_workout(self, title: str, raw_input: str, structured: dict) -> WorkoutRead:
        body = {"title": title, "raw_input": raw_input, "structured_json": structured}
        return WorkoutRead.model_validate(self._call("POST", "/api/workouts", json=body))

    def delete_workout(self, workout_id: int) -> None:
        self._call("DELETE", f"/api/workouts/{workout_id}")

    def parse(self, raw_text: str) -> ParsedWorkout:
        return ParsedWorkout.model_validate(
            self._call("POST", "/api/workouts/parse", json={"raw_text": raw_text})
        )

    # ---------- Planned workouts ----------
    def get_planned(self, day: dt.date) -> Optional[PlannedWorkoutRead]:
        data = self._call("GET", f"/api/planned/{day.isoformat()}")
        return PlannedWorkoutRead.model_validate(data) if data else None

    def list_planned(self, start: dt.date, end: dt.date) -> List[PlannedWorkoutRead]:
        data = self._call(
            "GET", "/api/planned", params={"start": start.isoformat(), "end": end.isoformat()}
        )
        return [PlannedWorkoutRead.model_validate(pw) for pw in data or []]

    def upsert_planned(self, day: dt.date, workout_id: int) -> PlannedWorkoutRead:
        data = self._call("PUT", f"/api/planned/{day.isoformat()}", json={"workout_id": workout_id})
        return PlannedWorkoutRead.model_validate(data)

    def update_planned(self, day: dt.date, is_locked: bool) -> PlannedWorkoutRead:
        data = self._call("PATCH", f"/api/planned/{day.isoformat()}", json={"is_locked": is_locked})
        return PlannedWorkoutRead.model_validate(data)

    def finish_planned(self, day: dt.date) -> PlannedWorkoutRead:
        return PlannedWorkoutRead.model_validate(
            self._call("POST", f"/api/planned/{day.isoformat()}/finish")
        )

    def delete_planned(self, day: dt.date) -> None:
        self._call("DELETE", f"/api/planned/{day.isoformat()}")

    # ---------- Set logs ----------
    def list_logs(self, planned_workout_id: int) -> List[WorkoutLogRead]:
        data = self._call("GET", "/api/logs", params={"planned_workout_id": planned_workout_id})
        return [WorkoutLogRead.model_validate(log) for log in data or []]

    def upsert_log(
        self,
        planned_workout_id: int,
        exercise_name: str,
        set_number: int,
        reps_completed: Optional[int],
        weight: Optional[float],
        is_completed: bool,
    ) -> WorkoutLogRead:
        body = {
            "planned_workout_id": planned_workout_id,
            "exercise_name": exercise_name,
            "set_number": set_number,
            "reps_completed": reps_completed,
            "weight": weight,
            "is_completed": is_completed,
        }
        return WorkoutLogRead.model_validate(self._call("PUT", "/api/logs", json=body))
