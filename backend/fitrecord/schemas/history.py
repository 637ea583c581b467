from datetime import datetime
from pydantic import BaseModel

class MaxWeightRead(BaseModel):
    # null means "no record yet", not zero
    max_weight_kg: float | None = None

class ExerciseHistoryRead(BaseModel):
    client_id: str
    exercise_id: str
    max_weight_kg: float | None = None
    last_performed_at: datetime
