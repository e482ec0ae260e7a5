"""
In-memory planning state: the cached week of planned days, the date the user
is looking at, and the "lock tomorrow" switch.

State is an immutable snapshot; every change goes through one of the reducer
functions below, which return a new snapshot. ``PlanningStore`` only holds the
current snapshot and the clock.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional
import datetime as dt

from ..schemas import PlannedWorkoutRead
from .domain import tomorrow_of


@dataclass(frozen=True)
class PlanningState:
    selected_date: dt.date
    week_start: Optional[dt.date] = None
    week_end: Optional[dt.date] = None
    planned: Dict[dt.date, PlannedWorkoutRead] = field(default_factory=dict)
    lock_tomorrow: bool = False

    def in_week(self, day: dt.date) -> bool:
        if self.week_start is None or self.week_end is None:
            return False
        return self.week_start <= day <= self.week_end


def tomorrow_locked(pw: Optional[PlannedWorkoutRead]) -> bool:
    """The "lock tomorrow" switch follows the stored lock flag, completed or not."""
    return bool(pw is not None and pw.is_locked)


# ---------- Reducers ----------
def replace_week(
    state: PlanningState,
    start: dt.date,
    end: dt.date,
    rows: Iterable[PlannedWorkoutRead],
    tomorrow: dt.date,
) -> PlanningState:
    planned = {pw.planned_date: pw for pw in rows}
    lock_tomorrow = state.lock_tomorrow
    if start <= tomorrow <= end:
        lock_tomorrow = tomorrow_locked(planned.get(tomorrow))
    return replace(state, week_start=start, week_end=end, planned=planned, lock_tomorrow=lock_tomorrow)


def put_entry(state: PlanningState, pw: PlannedWorkoutRead, tomorrow: dt.date) -> PlanningState:
    planned = dict(state.planned)
    planned[pw.planned_date] = pw
    lock_tomorrow = tomorrow_locked(pw) if pw.planned_date == tomorrow else state.lock_tomorrow
    return replace(state, planned=planned, lock_tomorrow=lock_tomorrow)


def patch_entry(state: PlanningState, day: dt.date, tomorrow: dt.date, **changes) -> PlanningState:
    planned = dict(state.planned)
    if day in planned:
        planned[day] = planned[day].model_copy(update=changes)
    lock_tomorrow = state.lock_tomorrow
    if day == tomorrow and "is_locked" in changes:
        lock_tomorrow = bool(changes["is_locked"])
    return replace(state, planned=planned, lock_tomorrow=lock_tomorrow)


def drop_entry(state: PlanningState, day: dt.date, tomorrow: dt.date) -> PlanningState:
    planned = {d: pw for d, pw in state.planned.items() if d != day}
    lock_tomorrow = False if day == tomorrow else state.lock_tomorrow
    return replace(state, planned=planned, lock_tomorrow=lock_tomorrow)


def select_date(state: PlanningState, day: dt.date) -> PlanningState:
    return replace(state, selected_date=day)


def set_lock_tomorrow(state: PlanningState, value: bool) -> PlanningState:
    return replace(state, lock_tomorrow=value)


class PlanningStore:
    def __init__(self, today: Callable[[], dt.date] = dt.date.today, selected_date: Optional[dt.date] = None):
        self.today = today
        self.state = PlanningState(selected_date=selected_date or today())

    @property
    def tomorrow(self) -> dt.date:
        return tomorrow_of(self.today())

    # ---------- reads ----------
    def entry(self, day: dt.date) -> Optional[PlannedWorkoutRead]:
        return self.state.planned.get(day)

    def week(self) -> List[PlannedWorkoutRead]:
        return [self.state.planned[d] for d in sorted(self.state.planned)]

    def locked_dates(self) -> List[dt.date]:
        return sorted(d for d, pw in self.state.planned.items() if pw.is_locked)

    def needs_reload(self) -> bool:
        return not self.state.in_week(self.state.selected_date)

    # ---------- writes ----------
    def replace_week(self, start: dt.date, end: dt.date, rows: Iterable[PlannedWorkoutRead]) -> None:
        self.state = replace_week(self.state, start, end, rows, self.tomorrow)

    def put(self, pw: PlannedWorkoutRead) -> None:
        self.state = put_entry(self.state, pw, self.tomorrow)

    def patch(self, day: dt.date, **changes) -> None:
        self.state = patch_entry(self.state, day, self.tomorrow, **changes)

    def drop(self, day: dt.date) -> None:
        self.state = drop_entry(self.state, day, self.tomorrow)

    def select(self, day: dt.date) -> None:
        self.state = select_date(self.state, day)

    def set_lock_tomorrow(self, value: bool) -> None:
        self.state = set_lock_tomorrow(self.state, value)
