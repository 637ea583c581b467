from __future__ import annotations
from typing import Any, Optional

from sqlalchemy import select, func

from fitrecord.errors import NotFoundError, SessionClosedError
from fitrecord.models import ExerciseSet, WorkoutExercise, WorkoutSession
from fitrecord.repositories.base import BaseRepository

EDITABLE_FIELDS = frozenset({"reps", "weight_kg", "notes"})

class SetRepository(BaseRepository[ExerciseSet]):
    model = ExerciseSet
    label = "Set"

    # READS
    async def list_for(self, workout_exercise_id: str) -> list[ExerciseSet]:
        stmt = (
            select(ExerciseSet)
            .where(ExerciseSet.workout_exercise_id == workout_exercise_id)
            .order_by(ExerciseSet.set_number.asc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def count_incomplete(self, workout_exercise_id: str, *, excluding: Optional[str] = None) -> int:
        stmt = select(func.count(ExerciseSet.id)).where(
            ExerciseSet.workout_exercise_id == workout_exercise_id,
            ExerciseSet.is_completed.is_(False),
        )
        if excluding is not None:
            stmt = stmt.where(ExerciseSet.id != excluding)
        return (await self.db.execute(stmt)).scalar_one()

    async def owner(self, set_id: str) -> Optional[tuple[str, str, str, str, bool]]:
        """(workout_exercise_id, client_id, exercise_id, session_id, session_is_open) for a set."""
        stmt = (
            select(
                ExerciseSet.workout_exercise_id,
                WorkoutExercise.client_id,
                WorkoutExercise.exercise_id,
                WorkoutSession.id,
                WorkoutSession.ended_at.is_(None),
            )
            .join(WorkoutExercise, WorkoutExercise.id == ExerciseSet.workout_exercise_id)
            .join(WorkoutSession, WorkoutSession.id == WorkoutExercise.workout_session_id)
            .where(ExerciseSet.id == set_id)
        )
        row = (await self.db.execute(stmt)).first()
        return tuple(row) if row is not None else None

    # WRITES
    async def create(
        self,
        workout_exercise_id: str,
        *,
        set_number: Optional[int] = None,
        reps: Optional[int] = None,
        weight_kg: Optional[float] = None,
    ) -> ExerciseSet:
        if await self.db.get(WorkoutExercise, workout_exercise_id) is None:
            raise NotFoundError("Workout exercise", workout_exercise_id)
        if set_number is None:
            # Next sequential number; deleted sets leave gaps rather than renumbering
            max_no = (
                await self.db.execute(
                    select(func.max(ExerciseSet.set_number)).where(
                        ExerciseSet.workout_exercise_id == workout_exercise_id
                    )
                )
            ).scalar_one()
            set_number = (max_no or 0) + 1
        s = ExerciseSet(
            workout_exercise_id=workout_exercise_id,
            set_number=set_number,
            reps=reps,
            weight_kg=weight_kg,
            is_completed=False,
        )
        return await self.add_and_commit(s)

    async def _editable(self, set_id: str) -> ExerciseSet:
        owner = await self.owner(set_id)
        if owner is None:
            raise NotFoundError(self.label, set_id)
        *_, session_id, is_open = owner
        if not is_open:
            raise SessionClosedError(session_id)
        return await self.get_or_raise(set_id)

    async def update(self, set_id: str, **fields: Any) -> ExerciseSet:
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"not editable: {', '.join(sorted(unknown))}")
        s = await self._editable(set_id)
        for key, value in fields.items():
            setattr(s, key, value)
        await self.commit()
        await self.db.refresh(s)
        return s

    async def mark_completed(self, set_id: str) -> ExerciseSet:
        s = await self._editable(set_id)
        s.is_completed = True
        await self.commit()
        await self.db.refresh(s)
        return s
