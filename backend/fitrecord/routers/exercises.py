from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.models import MuscleGroup
from fitrecord.repositories.exercise_repo import ExerciseRepository
from fitrecord.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    muscle_group: MuscleGroup | None = Query(None),
):
    return await ExerciseRepository(db).list(muscle_group=muscle_group)

@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(exercise_id: str, db: AsyncSession = Depends(get_db)):
    exercise = await ExerciseRepository(db).get(exercise_id)
    if not exercise:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return exercise

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
async def create_exercise(payload: ExerciseCreate, db: AsyncSession = Depends(get_db)):
    return await ExerciseRepository(db).create(**payload.model_dump())

@router.put("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(exercise_id: str, payload: ExerciseUpdate, db: AsyncSession = Depends(get_db)):
    return await ExerciseRepository(db).update(exercise_id, **payload.model_dump())

@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(exercise_id: str, db: AsyncSession = Depends(get_db)):
    await ExerciseRepository(db).delete_by_id(exercise_id)
