from __future__ import annotations
from typing import List, Optional
import datetime as dt
import logging

from ..schemas import PlannedWorkoutRead
from .domain import DayState, day_state, week_bounds
from .errors import ValidationFailure
from .optimistic import optimistic
from .remote import RemoteStore
from .store import PlanningStore, tomorrow_locked

logger = logging.getLogger(__name__)

MSG_LOCK_EMPTY = "Assign a workout first before locking this day."
MSG_LOCK_TOMORROW_EMPTY = "Assign a workout to tomorrow first before locking."
MSG_REMOVE_LOCKED = "Unlock this day before removing the workout."
MSG_ASSIGN_LOCKED = "Unlock this day to edit the workout."
MSG_REMOVE_EMPTY = "There is no workout planned for this day."
MSG_COMPLETED = "This workout is already completed."


class Planner:
    """
    Per-date state machine: EMPTY -> PLANNED <-> LOCKED -> COMPLETED.

    Guards run against the cached week before any remote call. Lock changes
    are optimistic and roll back if the remote update fails; assign, remove
    and finish update the cache only after the remote call succeeds.
    """

    def __init__(self, remote: RemoteStore, store: Optional[PlanningStore] = None):
        self.remote = remote
        self.store = store or PlanningStore()

    # ---------- reads ----------
    def state_of(self, day: dt.date) -> DayState:
        return day_state(self.store.entry(day))

    def load_week(self, reference: Optional[dt.date] = None) -> List[PlannedWorkoutRead]:
        """Fetch the Monday..Sunday week around ``reference`` and replace the cache."""
        start, end = week_bounds(reference or self.store.state.selected_date)
        tomorrow = self.store.tomorrow
        rows = self.remote.list_planned(start, end)
        outside = not (start <= tomorrow <= end)
        tomorrow_row = self.remote.get_planned(tomorrow) if outside else None

        # both reads succeeded; only now touch the cache
        self.store.replace_week(start, end, rows)
        if outside:
            self.store.set_lock_tomorrow(tomorrow_locked(tomorrow_row))
        return self.store.week()

    def select_date(self, day: dt.date) -> bool:
        """Returns True when ``day`` is outside the cached week and a reload is due."""
        self.store.select(day)
        return self.store.needs_reload()

    # ---------- transitions ----------
    def assign(self, workout_id: int, day: dt.date) -> PlannedWorkoutRead:
        current = self.store.entry(day)
        state = day_state(current)
        if state is DayState.locked:
            raise ValidationFailure(MSG_ASSIGN_LOCKED)
        if state is DayState.completed:
            raise ValidationFailure(MSG_COMPLETED)

        pw = self.remote.upsert_planned(day, workout_id)
        self.store.put(pw)
        logger.info("assigned workout %s to %s", workout_id, day)
        return pw

    def set_locked(self, day: dt.date, locked: bool) -> None:
        self._set_locked(day, locked, self.store.entry(day), MSG_LOCK_EMPTY)

    def lock_tomorrow(self, locked: bool) -> None:
        day = self.store.tomorrow
        current = self.store.entry(day)
        if current is None and not self.store.state.in_week(day):
            current = self.remote.get_planned(day)
        self._set_locked(day, locked, current, MSG_LOCK_TOMORROW_EMPTY)

    def _set_locked(
        self,
        day: dt.date,
        locked: bool,
        current: Optional[PlannedWorkoutRead],
        empty_message: str,
    ) -> None:
        if current is None:
            if locked:
                raise ValidationFailure(empty_message)
            return
        if current.is_completed:
            raise ValidationFailure(MSG_COMPLETED)

        store = self.store

        def snapshot():
            pw = store.entry(day)
            return (pw.is_locked if pw else None, store.state.lock_tomorrow)

        def apply():
            store.patch(day, is_locked=locked)

        def restore(prior):
            was_locked, lock_tomorrow = prior
            if was_locked is not None:
                store.patch(day, is_locked=was_locked)
            store.set_lock_tomorrow(lock_tomorrow)

        with optimistic(snapshot, apply, restore):
            self.remote.update_planned(day, locked)
        logger.info("%s %s", "locked" if locked else "unlocked", day)

    def remove(self, day: dt.date) -> None:
        state = self.state_of(day)
        if state is DayState.locked:
            raise ValidationFailure(MSG_REMOVE_LOCKED)
        if state is DayState.completed:
            raise ValidationFailure(MSG_COMPLETED)
        if state is DayState.empty:
            raise ValidationFailure(MSG_REMOVE_EMPTY)

        self.remote.delete_planned(day)
        self.store.drop(day)
        logger.info("removed workout from %s", day)

    def finish(self, day: dt.date) -> PlannedWorkoutRead:
        current = self.store.entry(day)
        if current is not None and current.is_completed:
            return current

        pw = self.remote.finish_planned(day)
        if current is not None or self.store.state.in_week(day):
            self.store.put(pw)
        logger.info("finished workout on %s", day)
        return pw
