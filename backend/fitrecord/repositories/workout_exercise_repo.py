from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from fitrecord.errors import NotFoundError
from fitrecord.models import Client, Exercise, ExerciseSet, WorkoutExercise, WorkoutSession
from fitrecord.repositories.base import BaseRepository

def with_details(stmt):
    """Eager-load the exercise definition and the ordered sets."""
    return stmt.options(
        selectinload(WorkoutExercise.exercise), selectinload(WorkoutExercise.sets)
    ).execution_options(populate_existing=True)

class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    model = WorkoutExercise
    label = "Workout exercise"

    # READS
    async def get_detailed(self, workout_exercise_id: str) -> Optional[WorkoutExercise]:
        stmt = with_details(select(WorkoutExercise).where(WorkoutExercise.id == workout_exercise_id))
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def list_for(self, session_id: str, client_id: str) -> list[WorkoutExercise]:
        stmt = with_details(
            select(WorkoutExercise)
            .where(
                WorkoutExercise.workout_session_id == session_id,
                WorkoutExercise.client_id == client_id,
            )
            .order_by(WorkoutExercise.order_index.asc(), WorkoutExercise.created_at.asc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def count_for(self, session_id: str, client_id: str) -> int:
        stmt = select(func.count(WorkoutExercise.id)).where(
            WorkoutExercise.workout_session_id == session_id,
            WorkoutExercise.client_id == client_id,
        )
        return (await self.db.execute(stmt)).scalar_one()

    # WRITES
    async def add(
        self, session_id: str, client_id: str, exercise_id: str, *, order_index: int = 0
    ) -> WorkoutExercise:
        if await self.db.get(WorkoutSession, session_id) is None:
            raise NotFoundError("Workout session", session_id)
        if await self.db.get(Client, client_id) is None:
            raise NotFoundError("Client", client_id)
        if await self.db.get(Exercise, exercise_id) is None:
            raise NotFoundError("Exercise", exercise_id)
        we = WorkoutExercise(
            workout_session_id=session_id,
            client_id=client_id,
            exercise_id=exercise_id,
            order_index=order_index,
        )
        self.db.add(we)
        await self.commit()
        return await self.get_detailed(we.id)

    async def add_for_clients(
        self, session_id: str, exercise_id: str, client_ids: list[str], *, default_sets: int = 3
    ) -> list[WorkoutExercise]:
        """Give every listed client the exercise (with empty sets) unless they already have it."""
        if await self.db.get(WorkoutSession, session_id) is None:
            raise NotFoundError("Workout session", session_id)
        if await self.db.get(Exercise, exercise_id) is None:
            raise NotFoundError("Exercise", exercise_id)

        created: list[WorkoutExercise] = []
        for client_id in client_ids:
            already = await self.db.execute(
                select(WorkoutExercise.id).where(
                    WorkoutExercise.workout_session_id == session_id,
                    WorkoutExercise.client_id == client_id,
                    WorkoutExercise.exercise_id == exercise_id,
                )
            )
            if already.first() is not None:
                continue
            we = WorkoutExercise(
                workout_session_id=session_id,
                client_id=client_id,
                exercise_id=exercise_id,
                order_index=await self.count_for(session_id, client_id),
            )
            self.db.add(we)
            await self.db.flush()
            for number in range(1, default_sets + 1):
                self.db.add(ExerciseSet(workout_exercise_id=we.id, set_number=number))
            created.append(we)
        await self.commit()

        ids = [we.id for we in created]
        if not ids:
            return []
        stmt = with_details(select(WorkoutExercise).where(WorkoutExercise.id.in_(ids)))
        by_id = {we.id: we for we in (await self.db.execute(stmt)).scalars().all()}
        return [by_id[i] for i in ids]
