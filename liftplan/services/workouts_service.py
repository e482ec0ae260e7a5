from __future__ import annotations
from typing import List, Optional
from fastapi import HTTPException
from sqlmodel import Session as DBSession, select


from ..models import Workout, PlannedWorkout
from ..schemas import WorkoutCreate
from .common import ensure_owner, normalize_whitespace, now_utc




def list_workouts(db: DBSession, user_id: Optional[int]) -> List[Workout]:
   if user_id is None:
       return []
   stmt = (
       select(Workout)
       .where(Workout.user_id == user_id)
       .order_by(Workout.created_at.desc(), Workout.id.desc())
   )
   return db.exec(stmt).all()




def create_workout(db: DBSession, user_id: int, payload: WorkoutCreate) -> Workout:
   title = normalize_whitespace(payload.title)
   if not title:
       raise HTTPException(status_code=400, detail="title is required")
   w = Workout(
       user_id=user_id,
       title=title,
       raw_input=payload.raw_input or "",
       structured_json=payload.structured_json or {},
       created_at=now_utc(),
       updated_at=now_utc(),
   )
   db.add(w)
   db.commit()
   db.refresh(w)
   return w




def get_workout(db: DBSession, user_id: int, workout_id: int) -> Workout:
   w = db.get(Workout, workout_id)
   ensure_owner(w, user_id, "workout")
   return w  # type: ignore




def delete_workout(db: DBSession, user_id: int, workout_id: int) -> None:
   w = db.get(Workout, workout_id)
   ensure_owner(w, user_id, "workout")
   in_use = db.exec(
       select(PlannedWorkout.id).where(PlannedWorkout.workout_id == workout_id)
   ).first()
   if in_use is not None:
       raise HTTPException(status_code=409, detail="Workout is planned on a day. Remove it from the planner first.")
   db.delete(w)
   db.commit()
