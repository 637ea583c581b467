from typing import Annotated
from pydantic import BaseModel, Field
from fitrecord.services.rest_timer import TimerPhase
from fitrecord.schemas.workout import SetRead, WorkoutExerciseRead

class LiveOpen(BaseModel):
    rest_seconds: int | None = None

class RestDurationUpdate(BaseModel):
    seconds: Annotated[int, Field(ge=1)]

class LiveRead(BaseModel):
    session_id: str
    rest_seconds: int
    rest_presets: list[int]
    selected_client_id: str | None = None

class TimerDisplayRead(BaseModel):
    client_id: str
    state: TimerPhase
    seconds: int
    text: str
    exercise_id: str | None = None
    duration: int | None = None

    model_config = {"from_attributes": True}

class AlertRead(BaseModel):
    client_id: str
    exercise_id: str
    fired_at: float
    vibration_pattern: list[int]
    tone_hz: int
    tone_ms: int

    model_config = {"from_attributes": True}

class TimersRead(BaseModel):
    timers: list[TimerDisplayRead]
    alerts: list[AlertRead]

class SetCompleteRequest(BaseModel):
    exercise_id: str
    client_id: str

class SetCompletionRead(BaseModel):
    set: SetRead
    remaining_sets: int
    timer: TimerDisplayRead

    model_config = {"from_attributes": True}

class ClientViewRead(BaseModel):
    client_id: str
    exercises: list[WorkoutExerciseRead]
    last_workout: list[WorkoutExerciseRead]
    max_weights: dict[str, float]

    model_config = {"from_attributes": True}
