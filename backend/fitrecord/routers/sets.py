from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.repositories.set_repo import SetRepository
from fitrecord.schemas.workout import SetCreate, SetRead, SetUpdate

router = APIRouter(prefix="/sets", tags=["sets"])

@router.post("", response_model=SetRead, status_code=status.HTTP_201_CREATED)
async def add_set(payload: SetCreate, db: AsyncSession = Depends(get_db)):
    return await SetRepository(db).create(
        payload.workout_exercise_id,
        set_number=payload.set_number,
        reps=payload.reps,
        weight_kg=payload.weight_kg,
    )

@router.patch("/{set_id}", response_model=SetRead)
async def update_set(set_id: str, payload: SetUpdate, db: AsyncSession = Depends(get_db)):
    # only fields present in the body are touched; explicit null clears a value
    return await SetRepository(db).update(set_id, **payload.model_dump(exclude_unset=True))

@router.post("/{set_id}/complete", response_model=SetRead)
async def complete_set(set_id: str, db: AsyncSession = Depends(get_db)):
    """Plain completion, no rest timer. Live views use /live/{session_id}/sets/{set_id}/complete."""
    return await SetRepository(db).mark_completed(set_id)

@router.delete("/{set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_set(set_id: str, db: AsyncSession = Depends(get_db)):
    await SetRepository(db).delete_by_id(set_id)
