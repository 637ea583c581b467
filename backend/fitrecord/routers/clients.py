from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.repositories.client_repo import ClientRepository
from fitrecord.schemas.client import ClientCreate, ClientRead, ClientUpdate

router = APIRouter(prefix="/clients", tags=["clients"])

@router.get("", response_model=list[ClientRead])
async def list_clients(db: AsyncSession = Depends(get_db)):
    return await ClientRepository(db).list()

@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: str, db: AsyncSession = Depends(get_db)):
    client = await ClientRepository(db).get(client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client

@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientCreate, db: AsyncSession = Depends(get_db)):
    return await ClientRepository(db).create(**payload.model_dump())

@router.put("/{client_id}", response_model=ClientRead)
async def update_client(client_id: str, payload: ClientUpdate, db: AsyncSession = Depends(get_db)):
    return await ClientRepository(db).update(client_id, **payload.model_dump())

@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, db: AsyncSession = Depends(get_db)):
    await ClientRepository(db).delete_by_id(client_id)
