from __future__ import annotations
from typing import Any

from sqlalchemy import select

from fitrecord.models import Client
from fitrecord.repositories.base import BaseRepository

class ClientRepository(BaseRepository[Client]):
    model = Client
    label = "Client"

    # READS
    async def list(self) -> list[Client]:
        stmt = select(Client).order_by(Client.name.asc())
        return list((await self.db.execute(stmt)).scalars().all())

    # WRITES
    async def create(self, **fields: Any) -> Client:
        return await self.add_and_commit(Client(**fields))

    async def update(self, client_id: str, **fields: Any) -> Client:
        client = await self.get_or_raise(client_id)
        for key, value in fields.items():
            setattr(client, key, value)
        await self.commit()
        await self.db.refresh(client)
        return client
