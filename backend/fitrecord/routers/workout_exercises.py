from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.repositories.session_repo import SessionRepository
from fitrecord.repositories.set_repo import SetRepository
from fitrecord.repositories.workout_exercise_repo import WorkoutExerciseRepository
from fitrecord.schemas.workout import (
    SetRead, WorkoutExerciseAddAll, WorkoutExerciseCreate, WorkoutExerciseRead,
)
from fitrecord.settings import get_settings

router = APIRouter(tags=["workout-exercises"])

@router.get("/workout-exercises", response_model=list[WorkoutExerciseRead])
async def list_workout_exercises(
    session_id: str = Query(...),
    client_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return await WorkoutExerciseRepository(db).list_for(session_id, client_id)

@router.post("/workout-exercises", response_model=WorkoutExerciseRead, status_code=status.HTTP_201_CREATED)
async def add_workout_exercise(payload: WorkoutExerciseCreate, db: AsyncSession = Depends(get_db)):
    return await WorkoutExerciseRepository(db).add(
        payload.session_id, payload.client_id, payload.exercise_id, order_index=payload.order_index
    )

@router.post(
    "/sessions/{session_id}/exercises",
    response_model=list[WorkoutExerciseRead],
    status_code=status.HTTP_201_CREATED,
)
async def add_exercise_for_all_clients(
    session_id: str, payload: WorkoutExerciseAddAll, db: AsyncSession = Depends(get_db)
):
    client_ids = [c.id for c in await SessionRepository(db).list_clients(session_id)]
    return await WorkoutExerciseRepository(db).add_for_clients(
        session_id,
        payload.exercise_id,
        client_ids,
        default_sets=get_settings().DEFAULT_SETS_PER_EXERCISE,
    )

@router.get("/workout-exercises/{workout_exercise_id}/sets", response_model=list[SetRead])
async def list_sets(workout_exercise_id: str, db: AsyncSession = Depends(get_db)):
    return await SetRepository(db).list_for(workout_exercise_id)

@router.delete("/workout-exercises/{workout_exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout_exercise(workout_exercise_id: str, db: AsyncSession = Depends(get_db)):
    await WorkoutExerciseRepository(db).delete_by_id(workout_exercise_id)
