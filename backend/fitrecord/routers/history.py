from enum import Enum
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.repositories.history_repo import HistoryRepository
from fitrecord.schemas.history import ExerciseHistoryRead, MaxWeightRead
from fitrecord.schemas.workout import SessionRead, WorkoutExerciseRead
from fitrecord.settings import get_settings

router = APIRouter(prefix="/history", tags=["history"])

class HistoryType(str, Enum):
    max_weight = "max_weight"
    exercise_history = "exercise_history"
    last_workout = "last_workout"
    recent_workouts = "recent_workouts"

@router.get("")
async def get_history(
    client_id: str = Query(...),
    type: HistoryType = Query(...),
    exercise_id: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Single entry point keyed by ``type``, one per history view of the app."""
    repo = HistoryRepository(db)
    if type is HistoryType.max_weight:
        if not exercise_id:
            raise HTTPException(status_code=400, detail="exercise_id required for max_weight")
        return MaxWeightRead(max_weight_kg=await repo.max_completed_weight(client_id, exercise_id))
    if type is HistoryType.exercise_history:
        rows = await repo.exercise_history(client_id)
        return [
            ExerciseHistoryRead(
                client_id=client_id,
                exercise_id=r.exercise_id,
                max_weight_kg=r.max_weight_kg,
                last_performed_at=r.last_performed_at,
            )
            for r in rows
        ]
    if type is HistoryType.last_workout:
        exercises = await repo.last_completed_workout_exercises(client_id)
        return [WorkoutExerciseRead.model_validate(we) for we in exercises]
    sessions = await repo.recent_sessions(client_id, limit=limit or get_settings().RECENT_SESSIONS_LIMIT)
    return [SessionRead.model_validate(s) for s in sessions]

@router.get("/max-weights", response_model=dict[str, float])
async def picker_max_weights(client_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    """Records for every weighted exercise, keyed by exercise id, for the exercise picker."""
    return await HistoryRepository(db).picker_max_weights(client_id)
