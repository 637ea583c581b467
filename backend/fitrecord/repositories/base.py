# fitrecord/repositories/base.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecord.errors import NotFoundError

T = TypeVar("T")  # SQLAlchemy model type

@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 async style."""
    model: type[T]
    label: str = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, entity_id: str) -> T | None:
        return await self.db.get(self.model, entity_id)

    async def get_or_raise(self, entity_id: str) -> T:
        entity = await self.get(entity_id)
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    async def page_from_stmt(self, stmt, *, limit: int = 50, offset: int = 0) -> Page[T]:
        total = (
            await self.db.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
        ).scalar_one()
        items = list((await self.db.execute(stmt.limit(limit).offset(offset))).scalars().all())
        return Page(items=items, total=total, limit=limit, offset=offset)

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def add_and_commit(self, entity: T) -> T:
        self.db.add(entity)
        await self.commit()
        await self.db.refresh(entity)
        return entity

    async def delete_by_id(self, entity_id: str) -> None:
        entity = await self.get_or_raise(entity_id)
        await self.db.delete(entity)
        await self.commit()
