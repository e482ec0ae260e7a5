from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field


# ---------- Parsed structure ----------
class ParsedExercise(BaseModel):
    name: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None


class ParsedWorkout(BaseModel):
    title: str
    category: Optional[str] = None
    muscle_groups: List[str] = Field(default_factory=list)
    duration: Optional[int] = None
    exercises: List[ParsedExercise] = Field(default_factory=list)


class ParseRequest(BaseModel):
    raw_text: str


# ---------- Workouts ----------
class WorkoutCreate(BaseModel):
    title: str
    raw_input: str = ""
    structured_json: dict = Field(default_factory=dict)


class WorkoutRead(WorkoutCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


# ---------- Planned workouts ----------
class PlannedWorkoutAssign(BaseModel):
    workout_id: int


class PlannedWorkoutUpdate(BaseModel):
    is_locked: bool


class PlannedWorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    workout_id: int
    planned_date: date
    is_locked: bool = False
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    workout: Optional[WorkoutRead] = None


# ---------- Set logs ----------
class WorkoutLogUpsert(BaseModel):
    planned_workout_id: int
    exercise_name: str
    set_number: int = Field(ge=1)
    reps_completed: Optional[int] = None
    weight: Optional[float] = None
    is_completed: bool = True


class WorkoutLogRead(WorkoutLogUpsert):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
