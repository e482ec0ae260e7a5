from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session as DBSession
import httpx


from ..db import get_session
from ..auth import get_current_user, get_optional_user
from ..models import User
from ..schemas import WorkoutCreate, WorkoutRead, ParseRequest, ParsedWorkout
from ..services import workouts_service as svc
from ..services.adapters.parser import parse_workout


router = APIRouter(prefix="/api/workouts", tags=["workouts"])


@router.get("", response_model=List[WorkoutRead])
def list_workouts(
    db: DBSession = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
):
    return svc.list_workouts(db=db, user_id=user.id if user else None)


@router.post("", response_model=WorkoutRead, status_code=201)
def create_workout(
    payload: WorkoutCreate,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.create_workout(db=db, user_id=user.id, payload=payload)


@router.post("/parse", response_model=ParsedWorkout)
async def parse(
    payload: ParseRequest,
    user: User = Depends(get_current_user),
):
    """
    Turn free text into structured exercises via the external parse service.
    """
    if not (payload.raw_text or "").strip():
        raise HTTPException(status_code=400, detail="Type a workout first.")
    try:
        return await parse_workout(payload.raw_text)
    except httpx.HTTPError as e:
        raise HTTPException(status_code=502, detail=f"Parse service HTTP error: {e!s}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Parser error: {type(e).__name__}: {e}")


@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(
    workout_id: int,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.get_workout(db=db, user_id=user.id, workout_id=workout_id)


@router.delete("/{workout_id}", status_code=204)
def delete_workout(
    workout_id: int,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    svc.delete_workout(db=db, user_id=user.id, workout_id=workout_id)
    return None
