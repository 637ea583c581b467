from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select, update

from fitrecord.db import utcnow
from fitrecord.errors import NotFoundError
from fitrecord.models import (
    Client, ExerciseSet, WorkoutExercise, WorkoutSession, WorkoutSessionClient,
)
from fitrecord.repositories.base import BaseRepository, Page

class SessionRepository(BaseRepository[WorkoutSession]):
    model = WorkoutSession
    label = "Workout session"

    # READS
    async def list(self, *, limit: int = 20, offset: int = 0) -> Page[WorkoutSession]:
        stmt = select(WorkoutSession).order_by(WorkoutSession.started_at.desc())
        return await self.page_from_stmt(stmt, limit=limit, offset=offset)

    async def get_active(self, client_id: Optional[str] = None) -> Optional[WorkoutSession]:
        stmt = select(WorkoutSession).where(WorkoutSession.is_active.is_(True))
        if client_id is not None:
            stmt = stmt.join(
                WorkoutSessionClient, WorkoutSessionClient.workout_session_id == WorkoutSession.id
            ).where(WorkoutSessionClient.client_id == client_id)
        stmt = stmt.order_by(WorkoutSession.started_at.desc()).limit(1)
        return (await self.db.execute(stmt)).scalars().first()

    async def list_clients(self, session_id: str) -> list[Client]:
        stmt = (
            select(Client)
            .join(WorkoutSessionClient, WorkoutSessionClient.client_id == Client.id)
            .where(WorkoutSessionClient.workout_session_id == session_id)
            .order_by(WorkoutSessionClient.created_at.asc(), Client.name.asc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def has_client(self, session_id: str, client_id: str) -> bool:
        stmt = select(WorkoutSessionClient.id).where(
            WorkoutSessionClient.workout_session_id == session_id,
            WorkoutSessionClient.client_id == client_id,
        )
        return (await self.db.execute(stmt)).first() is not None

    # WRITES
    async def create(
        self, client_ids: Iterable[str], *, started_at: Optional[datetime] = None
    ) -> WorkoutSession:
        sess = WorkoutSession(started_at=started_at or utcnow(), is_active=True)
        self.db.add(sess)
        await self.db.flush()
        for client_id in dict.fromkeys(client_ids):
            if await self.db.get(Client, client_id) is None:
                await self.db.rollback()
                raise NotFoundError("Client", client_id)
            self.db.add(WorkoutSessionClient(workout_session_id=sess.id, client_id=client_id))
        await self.commit()
        await self.db.refresh(sess)
        return sess

    async def add_client(self, session_id: str, client_id: str) -> None:
        await self.get_or_raise(session_id)
        if await self.db.get(Client, client_id) is None:
            raise NotFoundError("Client", client_id)
        if await self.has_client(session_id, client_id):
            return
        self.db.add(WorkoutSessionClient(workout_session_id=session_id, client_id=client_id))
        await self.commit()

    async def update_start_time(self, session_id: str, started_at: datetime) -> WorkoutSession:
        sess = await self.get_or_raise(session_id)
        sess.started_at = started_at
        await self.commit()
        await self.db.refresh(sess)
        return sess

    async def end(
        self, session_id: str, *, notes: Optional[str] = None, ended_at: Optional[datetime] = None
    ) -> WorkoutSession:
        """Finish a session, completing every set that has weight or reps entered."""
        sess = await self.get_or_raise(session_id)
        now = utcnow()
        exercise_ids = select(WorkoutExercise.id).where(WorkoutExercise.workout_session_id == session_id)
        await self.db.execute(
            update(ExerciseSet)
            .where(
                ExerciseSet.workout_exercise_id.in_(exercise_ids),
                ExerciseSet.is_completed.is_(False),
                (ExerciseSet.weight_kg.is_not(None)) | (ExerciseSet.reps.is_not(None)),
            )
            .values(is_completed=True, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        sess.ended_at = ended_at or now
        sess.is_active = False
        sess.notes = notes
        await self.commit()
        await self.db.refresh(sess)
        return sess
