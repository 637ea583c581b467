from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from fitrecord.db import get_db
from fitrecord.deps.live import get_live, get_registry
from fitrecord.repositories.session_repo import SessionRepository
from fitrecord.schemas.live import (
    AlertRead, ClientViewRead, LiveOpen, LiveRead, RestDurationUpdate, SetCompleteRequest,
    SetCompletionRead, TimerDisplayRead, TimersRead,
)
from fitrecord.schemas.workout import SetRead
from fitrecord.services.orchestrator import LiveSessionRegistry, LiveWorkout

router = APIRouter(prefix="/live", tags=["live"])

def _live_read(live: LiveWorkout) -> LiveRead:
    return LiveRead(
        session_id=live.session_id,
        rest_seconds=live.rest_seconds,
        rest_presets=list(live.rest_presets),
        selected_client_id=live.selected_client_id,
    )

@router.post("/{session_id}", response_model=LiveRead, status_code=status.HTTP_201_CREATED)
async def open_live_view(
    session_id: str,
    payload: LiveOpen | None = None,
    db: AsyncSession = Depends(get_db),
    registry: LiveSessionRegistry = Depends(get_registry),
):
    sess = await SessionRepository(db).get(session_id)
    if not sess:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    if not sess.is_active:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Session has ended")
    live = registry.open(session_id, rest_seconds=payload.rest_seconds if payload else None)
    return _live_read(live)

@router.get("/{session_id}", response_model=LiveRead)
async def get_live_view(live: LiveWorkout = Depends(get_live)):
    return _live_read(live)

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_live_view(session_id: str, registry: LiveSessionRegistry = Depends(get_registry)):
    await registry.close(session_id)

@router.put("/{session_id}/rest-duration", response_model=LiveRead)
async def set_rest_duration(payload: RestDurationUpdate, live: LiveWorkout = Depends(get_live)):
    live.set_global_rest_duration(payload.seconds)
    return _live_read(live)

@router.post("/{session_id}/sets/{set_id}/complete", response_model=SetCompletionRead)
async def complete_set(set_id: str, payload: SetCompleteRequest, live: LiveWorkout = Depends(get_live)):
    done = await live.on_set_completed(set_id, payload.exercise_id, payload.client_id)
    return SetCompletionRead(
        set=SetRead.model_validate(done.set),
        remaining_sets=done.remaining_sets,
        timer=TimerDisplayRead.model_validate(done.timer),
    )

@router.post("/{session_id}/select/{client_id}", response_model=TimerDisplayRead)
async def select_client(client_id: str, live: LiveWorkout = Depends(get_live)):
    return TimerDisplayRead.model_validate(live.on_client_selected(client_id))

@router.get("/{session_id}/view", response_model=ClientViewRead | None)
async def client_view(live: LiveWorkout = Depends(get_live)):
    view = await live.refresh_view()
    return ClientViewRead.model_validate(view) if view is not None else None

@router.get("/{session_id}/timers", response_model=TimersRead)
async def timers(live: LiveWorkout = Depends(get_live)):
    """Every running timer plus alerts fired since the last poll (each alert is returned once)."""
    return TimersRead(
        timers=[TimerDisplayRead.model_validate(d) for d in live.timer_displays()],
        alerts=[AlertRead.model_validate(a) for a in live.drain_alerts()],
    )

@router.get("/{session_id}/timers/{client_id}", response_model=TimerDisplayRead)
async def timer_for_client(client_id: str, live: LiveWorkout = Depends(get_live)):
    return TimerDisplayRead.model_validate(live.get_timer_display(client_id))
