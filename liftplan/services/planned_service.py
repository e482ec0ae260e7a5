from __future__ import annotations
from typing import List, Optional
import datetime as dt
from fastapi import HTTPException
from sqlmodel import Session as DBSession, select


from ..models import PlannedWorkout, Workout, WorkoutLog
from ..schemas import PlannedWorkoutRead, WorkoutRead, WorkoutLogUpsert
from .common import ensure_owner, now_utc




def _to_read(pw: PlannedWorkout, w: Optional[Workout]) -> PlannedWorkoutRead:
   out = PlannedWorkoutRead.model_validate(pw, from_attributes=True)
   if w is not None:
       out.workout = WorkoutRead.model_validate(w, from_attributes=True)
   return out




def _find(db: DBSession, user_id: int, planned_date: dt.date) -> Optional[PlannedWorkout]:
   return db.exec(
       select(PlannedWorkout)
       .where(PlannedWorkout.user_id == user_id)
       .where(PlannedWorkout.planned_date == planned_date)
   ).first()




def _existing_or_404(db: DBSession, user_id: int, planned_date: dt.date) -> PlannedWorkout:
   pw = _find(db, user_id, planned_date)
   if pw is None:
       raise HTTPException(status_code=404, detail="No workout planned for this date.")
   return pw




def _reject_completed(pw: PlannedWorkout) -> None:
   if pw.is_completed:
       raise HTTPException(status_code=409, detail="This workout is already completed.")




def get_planned(db: DBSession, user_id: Optional[int], planned_date: dt.date) -> Optional[PlannedWorkoutRead]:
   if user_id is None:
       return None
   pw = _find(db, user_id, planned_date)
   if pw is None:
       return None
   return _to_read(pw, db.get(Workout, pw.workout_id))




def list_planned(
   db: DBSession,
   user_id: Optional[int],
   start: dt.date,
   end: dt.date,
) -> List[PlannedWorkoutRead]:
   if user_id is None:
       return []
   if end < start:
       raise HTTPException(status_code=422, detail="end must not be before start")
   rows = db.exec(
       select(PlannedWorkout, Workout)
       .join(Workout, PlannedWorkout.workout_id == Workout.id)
       .where(PlannedWorkout.user_id == user_id)
       .where(PlannedWorkout.planned_date >= start)
       .where(PlannedWorkout.planned_date <= end)
       .order_by(PlannedWorkout.planned_date.asc())
   ).all()
   return [_to_read(pw, w) for pw, w in rows]




def assign(db: DBSession, user_id: int, planned_date: dt.date, workout_id: int) -> PlannedWorkoutRead:
   """Upsert keyed by (user, date); the day comes back unlocked and not completed."""
   w = db.get(Workout, workout_id)
   ensure_owner(w, user_id, "workout")

   pw = _find(db, user_id, planned_date)
   if pw is None:
       pw = PlannedWorkout(user_id=user_id, planned_date=planned_date, workout_id=workout_id)
   else:
       if pw.is_locked:
           raise HTTPException(status_code=422, detail="Unlock this day to edit the workout.")
       _reject_completed(pw)
       pw.workout_id = workout_id
   pw.is_locked = False
   pw.is_completed = False
   pw.completed_at = None
   db.add(pw)
   db.commit()
   db.refresh(pw)
   return _to_read(pw, w)




def set_locked(db: DBSession, user_id: int, planned_date: dt.date, is_locked: bool) -> PlannedWorkoutRead:
   pw = _existing_or_404(db, user_id, planned_date)
   _reject_completed(pw)
   if pw.is_locked != is_locked:
       pw.is_locked = is_locked
       db.add(pw)
       db.commit()
       db.refresh(pw)
   return _to_read(pw, db.get(Workout, pw.workout_id))




def finish(db: DBSession, user_id: int, planned_date: dt.date) -> PlannedWorkoutRead:
   pw = _existing_or_404(db, user_id, planned_date)
   if not pw.is_completed:
       pw.is_completed = True
       pw.completed_at = now_utc()
       db.add(pw)
       db.commit()
       db.refresh(pw)
   return _to_read(pw, db.get(Workout, pw.workout_id))




def remove(db: DBSession, user_id: int, planned_date: dt.date) -> None:
   pw = _existing_or_404(db, user_id, planned_date)
   if pw.is_locked:
       raise HTTPException(status_code=422, detail="Unlock this day before removing the workout.")
   _reject_completed(pw)
   for log in db.exec(select(WorkoutLog).where(WorkoutLog.planned_workout_id == pw.id)).all():
       db.delete(log)
   db.delete(pw)
   db.commit()




# ---------- Set logs ----------
def _planned_or_404(db: DBSession, user_id: int, planned_workout_id: int) -> PlannedWorkout:
   pw = db.get(PlannedWorkout, planned_workout_id)
   ensure_owner(pw, user_id, "planned workout")
   return pw  # type: ignore




def list_logs(db: DBSession, user_id: Optional[int], planned_workout_id: int) -> List[WorkoutLog]:
   if user_id is None:
       return []
   pw = db.get(PlannedWorkout, planned_workout_id)
   if not pw or pw.user_id != user_id:
       return []
   return db.exec(
       select(WorkoutLog)
       .where(WorkoutLog.planned_workout_id == planned_workout_id)
       .order_by(WorkoutLog.set_number.asc(), WorkoutLog.id.asc())
   ).all()




def upsert_log(db: DBSession, user_id: int, payload: WorkoutLogUpsert) -> WorkoutLog:
   pw = _planned_or_404(db, user_id, payload.planned_workout_id)
   _reject_completed(pw)
   name = payload.exercise_name
   if not (name or "").strip():
       raise HTTPException(status_code=400, detail="exercise_name is required")

   log = db.exec(
       select(WorkoutLog)
       .where(WorkoutLog.planned_workout_id == payload.planned_workout_id)
       .where(WorkoutLog.exercise_name == name)
       .where(WorkoutLog.set_number == payload.set_number)
   ).first()
   if log is None:
       log = WorkoutLog(
           planned_workout_id=payload.planned_workout_id,
           exercise_name=name,
           set_number=payload.set_number,
       )
   log.reps_completed = payload.reps_completed
   log.weight = payload.weight
   log.is_completed = payload.is_completed
   db.add(log)
   db.commit()
   db.refresh(log)
   return log
