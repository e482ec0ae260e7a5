"""
Set-by-set logging for one planned day.

Each (exercise, set number) gets a ``LogEntry`` holding the text the user sees
in the reps/weight fields plus its own saving/error state, so a failed save on
one set never touches another.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import logging
import math

from ..schemas import ParsedExercise, PlannedWorkoutRead, WorkoutLogRead
from .domain import exercises as exercises_of, from_token
from .errors import PlannerError, ValidationFailure
from .planner import MSG_COMPLETED, Planner
from .timer import RestTimer

logger = logging.getLogger(__name__)

LogKey = Tuple[str, int]

MSG_BAD_DATE = "Invalid date. Please go back and try again."
MSG_NOTHING_PLANNED = "No workout planned for this date."


@dataclass
class LogEntry:
    exercise_name: str
    set_number: int
    reps: str = ""
    weight: str = ""
    completed: bool = False
    saving: bool = False
    save_error: Optional[str] = None
    logged: Optional[WorkoutLogRead] = None


class FinishOutcome(str, Enum):
    finished = "finished"
    needs_confirmation = "needs_confirmation"
    cancelled = "cancelled"


def _text(v) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def parse_reps(value: str) -> Optional[int]:
    """Reps text to int ("8.5" truncates); blank or junk stays None, never 0."""
    s = (value or "").strip()
    if not s:
        return None
    try:
        f = float(s)
    except ValueError:
        return None
    return int(f) if math.isfinite(f) else None


def parse_weight(value: str) -> Optional[float]:
    s = (value or "").strip()
    if not s:
        return None
    try:
        f = float(s)
    except ValueError:
        return None
    return f if math.isfinite(f) else None


def materialize(
    exercises: Iterable[ParsedExercise],
    logs: Iterable[WorkoutLogRead],
) -> Dict[LogKey, LogEntry]:
    """
    One entry per prescribed set. Values come from the persisted log when one
    exists for the key, otherwise from the prescription.
    """
    by_key: Dict[LogKey, WorkoutLogRead] = {(l.exercise_name, l.set_number): l for l in logs}
    entries: Dict[LogKey, LogEntry] = {}
    for ex in exercises:
        for n in range(1, (ex.sets or 1) + 1):
            existing = by_key.get((ex.name, n))
            if existing is not None:
                reps = existing.reps_completed if existing.reps_completed is not None else ex.reps
                weight = existing.weight if existing.weight is not None else ex.weight
            else:
                reps, weight = ex.reps, ex.weight
            entries[(ex.name, n)] = LogEntry(
                exercise_name=ex.name,
                set_number=n,
                reps=_text(reps),
                weight=_text(weight),
                completed=existing is not None and existing.is_completed,
                logged=existing,
            )
    return entries


class ExecutionSession:
    def __init__(self, planner: Planner, timer: Optional[RestTimer] = None):
        self.planner = planner
        self.remote = planner.remote
        self.timer = timer or RestTimer()
        self.planned: Optional[PlannedWorkoutRead] = None
        self.exercises: List[ParsedExercise] = []
        self.entries: Dict[LogKey, LogEntry] = {}
        self.closed = False

    def load(self, date_token: str) -> None:
        day = from_token(date_token)
        if day is None:
            raise ValidationFailure(MSG_BAD_DATE)
        pw = self.remote.get_planned(day)
        if pw is None:
            raise ValidationFailure(MSG_NOTHING_PLANNED)

        exercises = exercises_of(pw.workout)
        logs = self.remote.list_logs(pw.id)
        self.planned = pw
        self.exercises = exercises
        self.entries = materialize(exercises, logs)

    def entries_for(self, exercise_name: str) -> List[LogEntry]:
        return [e for e in self.entries.values() if e.exercise_name == exercise_name]

    @property
    def any_completed(self) -> bool:
        return any(e.completed for e in self.entries.values())

    def _ensure_editable(self) -> None:
        if self.planned is None:
            raise ValidationFailure(MSG_NOTHING_PLANNED)
        if self.closed or self.planned.is_completed:
            raise ValidationFailure(MSG_COMPLETED)

    def _entry(self, exercise_name: str, set_number: int) -> LogEntry:
        try:
            return self.entries[(exercise_name, set_number)]
        except KeyError:
            raise ValidationFailure(f"No set {set_number} for {exercise_name}.")

    # ---------- per-set operations ----------
    def toggle_set(self, exercise_name: str, set_number: int) -> LogEntry:
        self._ensure_editable()
        entry = self._entry(exercise_name, set_number)
        prior = entry.completed
        entry.completed = not prior
        if not self._save(entry):
            entry.completed = prior
        return entry

    def edit_field(self, exercise_name: str, set_number: int, field: str, value: str) -> LogEntry:
        if field not in ("reps", "weight"):
            raise ValueError(f"unknown field {field!r}")
        self._ensure_editable()
        entry = self._entry(exercise_name, set_number)
        setattr(entry, field, value)
        entry.save_error = None
        return entry

    def save_on_blur(self, exercise_name: str, set_number: int) -> LogEntry:
        entry = self._entry(exercise_name, set_number)
        self._save(entry)
        return entry

    def _save(self, entry: LogEntry) -> bool:
        self._ensure_editable()
        entry.saving = True
        entry.save_error = None
        try:
            entry.logged = self.remote.upsert_log(
                self.planned.id,
                entry.exercise_name,
                entry.set_number,
                parse_reps(entry.reps),
                parse_weight(entry.weight),
                entry.completed,
            )
            return True
        except PlannerError as e:
            logger.warning("saving %s set %s failed: %s", entry.exercise_name, entry.set_number, e.message)
            entry.save_error = e.message or "Save failed"
            return False
        finally:
            entry.saving = False

    # ---------- finish ----------
    def finish(self, confirm: Optional[Callable[[], bool]] = None) -> FinishOutcome:
        """
        With nothing logged the caller has to confirm ("finish anyway?");
        without a ``confirm`` callable that case reports NEEDS_CONFIRMATION.
        """
        if self.planned is None:
            raise ValidationFailure(MSG_NOTHING_PLANNED)
        if not self.any_completed:
            if confirm is None:
                return FinishOutcome.needs_confirmation
            if not confirm():
                return FinishOutcome.cancelled

        self.planned = self.planner.finish(self.planned.planned_date)
        self.close()
        return FinishOutcome.finished

    def close(self) -> None:
        self.timer.cancel()
        self.closed = True
