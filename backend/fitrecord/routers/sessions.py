from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.deps.live import get_registry
from fitrecord.repositories.session_repo import SessionRepository
from fitrecord.schemas.client import ClientRead
from fitrecord.schemas.workout import (
    SessionClientAdd, SessionCreate, SessionEnd, SessionRead, SessionStartUpdate,
)
from fitrecord.services.orchestrator import LiveSessionRegistry

router = APIRouter(prefix="/sessions", tags=["sessions"])

@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(payload: SessionCreate, db: AsyncSession = Depends(get_db)):
    return await SessionRepository(db).create(payload.client_ids)

@router.get("", response_model=list[SessionRead])
async def list_sessions(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = await SessionRepository(db).list(limit=limit, offset=offset)
    return page.items

@router.get("/active", response_model=SessionRead | None)
async def get_active_session(client_id: str | None = Query(None), db: AsyncSession = Depends(get_db)):
    return await SessionRepository(db).get_active(client_id)

@router.get("/{session_id}", response_model=SessionRead)
async def get_session(session_id: str, db: AsyncSession = Depends(get_db)):
    sess = await SessionRepository(db).get(session_id)
    if not sess:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return sess

@router.get("/{session_id}/clients", response_model=list[ClientRead])
async def list_session_clients(session_id: str, db: AsyncSession = Depends(get_db)):
    return await SessionRepository(db).list_clients(session_id)

@router.post("/{session_id}/clients", status_code=status.HTTP_204_NO_CONTENT)
async def add_session_client(session_id: str, payload: SessionClientAdd, db: AsyncSession = Depends(get_db)):
    await SessionRepository(db).add_client(session_id, payload.client_id)

@router.patch("/{session_id}/start", response_model=SessionRead)
async def update_start_time(session_id: str, payload: SessionStartUpdate, db: AsyncSession = Depends(get_db)):
    return await SessionRepository(db).update_start_time(session_id, payload.started_at)

@router.post("/{session_id}/end", response_model=SessionRead)
async def end_session(
    session_id: str,
    payload: SessionEnd,
    db: AsyncSession = Depends(get_db),
    registry: LiveSessionRegistry = Depends(get_registry),
):
    sess = await SessionRepository(db).end(session_id, notes=payload.notes, ended_at=payload.ended_at)
    if session_id in registry:
        await registry.close(session_id)
    return sess

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_session(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    registry: LiveSessionRegistry = Depends(get_registry),
):
    await SessionRepository(db).delete_by_id(session_id)
    if session_id in registry:
        await registry.close(session_id)
