from typing import List, Optional
import datetime as dt


from fastapi import APIRouter, Depends, Query
from sqlmodel import Session as DBSession


from ..db import get_session
from ..auth import get_current_user, get_optional_user
from ..models import User
from ..schemas import (
   PlannedWorkoutAssign,
   PlannedWorkoutRead,
   PlannedWorkoutUpdate,
   WorkoutLogRead,
   WorkoutLogUpsert,
)
from ..services import planned_service as svc


router = APIRouter(prefix="/api", tags=["planner"])


def _uid(user: Optional[User]) -> Optional[int]:
   return user.id if user else None


@router.get("/planned", response_model=List[PlannedWorkoutRead])
def list_planned(
   start: dt.date = Query(..., description="YYYY-MM-DD"),
   end: dt.date = Query(..., description="YYYY-MM-DD (inclusive)"),
   db: DBSession = Depends(get_session),
   user: Optional[User] = Depends(get_optional_user),
):
   return svc.list_planned(db=db, user_id=_uid(user), start=start, end=end)


@router.get("/planned/{planned_date}", response_model=Optional[PlannedWorkoutRead])
def get_planned(
   planned_date: dt.date,
   db: DBSession = Depends(get_session),
   user: Optional[User] = Depends(get_optional_user),
):
   return svc.get_planned(db=db, user_id=_uid(user), planned_date=planned_date)


@router.put("/planned/{planned_date}", response_model=PlannedWorkoutRead)
def assign_workout(
   planned_date: dt.date,
   payload: PlannedWorkoutAssign,
   db: DBSession = Depends(get_session),
   user: User = Depends(get_current_user),
):
   return svc.assign(db=db, user_id=user.id, planned_date=planned_date, workout_id=payload.workout_id)


@router.patch("/planned/{planned_date}", response_model=PlannedWorkoutRead)
def set_locked(
   planned_date: dt.date,
   payload: PlannedWorkoutUpdate,
   db: DBSession = Depends(get_session),
   user: User = Depends(get_current_user),
):
   return svc.set_locked(db=db, user_id=user.id, planned_date=planned_date, is_locked=payload.is_locked)


@router.post("/planned/{planned_date}/finish", response_model=PlannedWorkoutRead)
def finish_workout(
   planned_date: dt.date,
   db: DBSession = Depends(get_session),
   user: User = Depends(get_current_user),
):
   return svc.finish(db=db, user_id=user.id, planned_date=planned_date)


@router.delete("/planned/{planned_date}", status_code=204)
def remove_workout(
   planned_date: dt.date,
   db: DBSession = Depends(get_session),
   user: User = Depends(get_current_user),
):
   svc.remove(db=db, user_id=user.id, planned_date=planned_date)
   return None


# ---------- Set logs ----------
@router.get("/logs", response_model=List[WorkoutLogRead])
def list_logs(
   planned_workout_id: int = Query(...),
   db: DBSession = Depends(get_session),
   user: Optional[User] = Depends(get_optional_user),
):
   return svc.list_logs(db=db, user_id=_uid(user), planned_workout_id=planned_workout_id)


@router.put("/logs", response_model=WorkoutLogRead)
def upsert_log(
   payload: WorkoutLogUpsert,
   db: DBSession = Depends(get_session),
   user: User = Depends(get_current_user),
):
   return svc.upsert_log(db=db, user_id=user.id, payload=payload)
