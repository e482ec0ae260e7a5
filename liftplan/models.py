from __future__ import annotations
from typing import Optional
import datetime as dt
from sqlalchemy import Column, JSON, UniqueConstraint
from sqlmodel import SQLModel, Field


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# ---------- Master user ----------
class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    created_at: dt.datetime = Field(default_factory=_utcnow)


# ---------- Workouts (reusable templates) ----------
class Workout(SQLModel, table=True):
    """
    Free text as typed by the user plus the structure the parse service
    returned for it. The structure is prescription data and is never edited.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    title: str
    raw_input: str = ""
    structured_json: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)


# ---------- Planned days ----------
class PlannedWorkout(SQLModel, table=True):
    """
    One workout assigned to one calendar date. The date is the natural key
    within a user's scope.
    """
    __table_args__ = (UniqueConstraint("user_id", "planned_date", name="uq_planned_user_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    workout_id: int = Field(foreign_key="workout.id", index=True)
    planned_date: dt.date = Field(index=True)
    is_locked: bool = Field(default=False)
    is_completed: bool = Field(default=False)
    completed_at: Optional[dt.datetime] = None


# ---------- Set logs ----------
class WorkoutLog(SQLModel, table=True):
    """
    Ownership comes via the parent planned workout, so no user_id here.
    """
    __table_args__ = (
        UniqueConstraint("planned_workout_id", "exercise_name", "set_number", name="uq_log_set"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    planned_workout_id: int = Field(foreign_key="plannedworkout.id", index=True)
    exercise_name: str
    set_number: int = Field(default=1)
    reps_completed: Optional[int] = None
    weight: Optional[float] = None
    is_completed: bool = Field(default=True)
    created_at: dt.datetime = Field(default_factory=_utcnow)
