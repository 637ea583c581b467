from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints
from fitrecord.schemas.exercise import ExerciseRead

NotesStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]
PosInt = Annotated[int, Field(ge=1)]
Reps = Annotated[int, Field(ge=0, le=1000)]
WeightKg = Annotated[float, Field(ge=0, le=1000)]

# Sessions
class SessionCreate(BaseModel):
    client_ids: list[str] = Field(min_length=1)

class SessionEnd(BaseModel):
    notes: NotesStr | None = None
    ended_at: datetime | None = None

class SessionStartUpdate(BaseModel):
    started_at: datetime

class SessionClientAdd(BaseModel):
    client_id: str

class SessionRead(BaseModel):
    id: str
    started_at: datetime
    ended_at: datetime | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

# Sets
class SetCreate(BaseModel):
    workout_exercise_id: str
    # omitted -> next number after the highest existing one
    set_number: PosInt | None = None
    reps: Reps | None = None
    weight_kg: WeightKg | None = None

class SetUpdate(BaseModel):
    reps: Reps | None = None
    weight_kg: WeightKg | None = None
    notes: NotesStr | None = None

class SetRead(BaseModel):
    id: str
    workout_exercise_id: str
    set_number: int
    reps: int | None = None
    weight_kg: float | None = None
    is_completed: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

# Workout exercises
class WorkoutExerciseCreate(BaseModel):
    session_id: str
    client_id: str
    exercise_id: str
    order_index: Annotated[int, Field(ge=0)] = 0

class WorkoutExerciseAddAll(BaseModel):
    """Add one exercise for every client of a session that does not have it yet."""
    exercise_id: str

class WorkoutExerciseRead(BaseModel):
    id: str
    workout_session_id: str
    client_id: str
    exercise_id: str
    order_index: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    exercise: ExerciseRead | None = None
    sets: list[SetRead] = []

    model_config = {"from_attributes": True}
