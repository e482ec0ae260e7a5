from __future__ import annotations
from typing import List, Optional, Tuple
import datetime as dt
import re
from enum import Enum

from ..schemas import ParsedExercise, PlannedWorkoutRead, WorkoutRead
from ..structure import as_int, exercises_of, muscle_groups_of, norm_name

DATE_TOKEN_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class DayState(str, Enum):
    empty = "empty"
    planned = "planned"
    locked = "locked"
    completed = "completed"


def day_state(pw: Optional[PlannedWorkoutRead]) -> DayState:
    if pw is None:
        return DayState.empty
    if pw.is_completed:
        return DayState.completed
    if pw.is_locked:
        return DayState.locked
    return DayState.planned


# ---------- Calendar ----------
def week_bounds(reference: dt.date) -> Tuple[dt.date, dt.date]:
    """Monday..Sunday week containing ``reference``."""
    monday = reference - dt.timedelta(days=reference.weekday())
    return monday, monday + dt.timedelta(days=6)


def tomorrow_of(day: dt.date) -> dt.date:
    return day + dt.timedelta(days=1)


def to_token(day: dt.date) -> str:
    return day.isoformat()


def from_token(token: str) -> Optional[dt.date]:
    """YYYY-MM-DD only; anything else (impossible dates included) is None."""
    if not isinstance(token, str) or not DATE_TOKEN_RE.fullmatch(token):
        return None
    try:
        return dt.date.fromisoformat(token)
    except ValueError:
        return None


# ---------- Workout accessors ----------
def exercises(workout: Optional[WorkoutRead]) -> List[ParsedExercise]:
    return exercises_of(workout.structured_json) if workout is not None else []


def exercise_count(workout: Optional[WorkoutRead]) -> int:
    return len(exercises(workout))


def total_sets(workout: Optional[WorkoutRead]) -> int:
    return sum(ex.sets or 1 for ex in exercises(workout))


def muscle_groups_label(workout: Optional[WorkoutRead], sep: str = " · ") -> str:
    if workout is None:
        return ""
    return sep.join(muscle_groups_of(workout.structured_json))


def category_label(workout: Optional[WorkoutRead]) -> str:
    if workout is None or not isinstance(workout.structured_json, dict):
        return ""
    return norm_name(workout.structured_json.get("category"))


def duration_label(workout: Optional[WorkoutRead]) -> str:
    if workout is None or not isinstance(workout.structured_json, dict):
        return ""
    minutes = as_int(workout.structured_json.get("duration"))
    return f"{minutes} min" if minutes is not None and minutes > 0 else ""
