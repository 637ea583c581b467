# fitrecord/deps/live.py
from fastapi import Depends, Request
from fitrecord.services.orchestrator import LiveSessionRegistry, LiveWorkout

def get_registry(request: Request) -> LiveSessionRegistry:
    """The registry is created in the app lifespan and kept on app.state."""
    return request.app.state.live

def get_live(session_id: str, registry: LiveSessionRegistry = Depends(get_registry)) -> LiveWorkout:
    """Open live view for the ``{session_id}`` path parameter (404 when not opened)."""
    return registry.get(session_id)
