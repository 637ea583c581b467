"""Read-only history over completed sets of ended sessions, recomputed on every read."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecord.models import (
    Exercise, ExerciseSet, WorkoutExercise, WorkoutSession, WorkoutSessionClient,
)
from fitrecord.repositories.workout_exercise_repo import WorkoutExerciseRepository

@dataclass(slots=True)
class ExerciseHistoryRow:
    exercise_id: str
    max_weight_kg: Optional[float]
    last_performed_at: datetime

def _finished_sets(client_id: str, *columns):
    """FROM/WHERE shared by every record query: completed sets of ended sessions."""
    return (
        select(*columns)
        .select_from(WorkoutExercise)
        .join(ExerciseSet, ExerciseSet.workout_exercise_id == WorkoutExercise.id)
        .join(WorkoutSession, WorkoutSession.id == WorkoutExercise.workout_session_id)
        .where(
            WorkoutSession.ended_at.is_not(None),
            ExerciseSet.is_completed.is_(True),
            WorkoutExercise.client_id == client_id,
        )
    )

class HistoryRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def max_completed_weight(self, client_id: str, exercise_id: str) -> Optional[float]:
        """Heaviest completed weight, or None when there is no record (distinct from 0 kg)."""
        stmt = _finished_sets(client_id, func.max(ExerciseSet.weight_kg)).where(
            WorkoutExercise.exercise_id == exercise_id
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def max_weights(self, client_id: str, exercise_ids: Iterable[str]) -> dict[str, float]:
        """Records for many exercises at once; exercises without a record are left out."""
        ids = list(exercise_ids)
        if not ids:
            return {}
        stmt = (
            _finished_sets(client_id, WorkoutExercise.exercise_id, func.max(ExerciseSet.weight_kg))
            .where(WorkoutExercise.exercise_id.in_(ids))
            .group_by(WorkoutExercise.exercise_id)
        )
        rows = (await self.db.execute(stmt)).all()
        return {ex_id: weight for ex_id, weight in rows if weight is not None}

    async def picker_max_weights(self, client_id: str) -> dict[str, float]:
        """Records for every weighted exercise in the library (bodyweight ones are skipped)."""
        weighted = select(Exercise.id).where(Exercise.is_bodyweight.is_(False))
        ids = list((await self.db.execute(weighted)).scalars().all())
        return await self.max_weights(client_id, ids)

    async def exercise_history(self, client_id: str) -> list[ExerciseHistoryRow]:
        stmt = (
            _finished_sets(
                client_id,
                WorkoutExercise.exercise_id,
                func.max(ExerciseSet.weight_kg),
                func.max(WorkoutSession.ended_at),
            )
            .group_by(WorkoutExercise.exercise_id)
            .order_by(func.max(WorkoutSession.ended_at).desc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [ExerciseHistoryRow(ex_id, weight, last) for ex_id, weight, last in rows]

    async def last_ended_session_id(self, client_id: str) -> Optional[str]:
        stmt = (
            select(WorkoutSession.id)
            .join(WorkoutSessionClient, WorkoutSessionClient.workout_session_id == WorkoutSession.id)
            .where(WorkoutSessionClient.client_id == client_id, WorkoutSession.ended_at.is_not(None))
            .order_by(WorkoutSession.ended_at.desc())
            .limit(1)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def last_completed_workout_exercises(self, client_id: str) -> list[WorkoutExercise]:
        session_id = await self.last_ended_session_id(client_id)
        if session_id is None:
            return []
        return await WorkoutExerciseRepository(self.db).list_for(session_id, client_id)

    async def recent_sessions(self, client_id: str, *, limit: int = 10) -> list[WorkoutSession]:
        stmt = (
            select(WorkoutSession)
            .join(WorkoutSessionClient, WorkoutSessionClient.workout_session_id == WorkoutSession.id)
            .where(WorkoutSessionClient.client_id == client_id)
            .order_by(WorkoutSession.started_at.desc())
            .limit(limit)
        )
        return list((await self.db.execute(stmt)).scalars().all())
