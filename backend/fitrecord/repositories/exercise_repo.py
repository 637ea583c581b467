from __future__ import annotations
from typing import Any

from sqlalchemy import select

from fitrecord.models import Exercise, MuscleGroup
from fitrecord.repositories.base import BaseRepository

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise
    label = "Exercise"

    # READS
    async def list(self, *, muscle_group: MuscleGroup | None = None) -> list[Exercise]:
        stmt = select(Exercise)
        if muscle_group is not None:
            stmt = stmt.where(Exercise.muscle_group == muscle_group).order_by(Exercise.name.asc())
        else:
            stmt = stmt.order_by(Exercise.muscle_group.asc(), Exercise.name.asc())
        return list((await self.db.execute(stmt)).scalars().all())

    async def rest_seconds(self, exercise_id: str) -> int | None:
        """Configured rest for an exercise; None when unset or the exercise is gone."""
        stmt = select(Exercise.default_rest_seconds).where(Exercise.id == exercise_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    # WRITES
    async def create(self, **fields: Any) -> Exercise:
        return await self.add_and_commit(Exercise(**fields))

    async def update(self, exercise_id: str, **fields: Any) -> Exercise:
        exercise = await self.get_or_raise(exercise_id)
        for key, value in fields.items():
            setattr(exercise, key, value)
        await self.commit()
        await self.db.refresh(exercise)
        return exercise
