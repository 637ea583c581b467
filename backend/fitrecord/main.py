# fitrecord/main.py
import time
import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fitrecord.routers.clients import router as clients_router
from fitrecord.routers.exercises import router as exercises_router
from fitrecord.routers.sessions import router as sessions_router
from fitrecord.routers.workout_exercises import router as workout_exercises_router
from fitrecord.routers.sets import router as sets_router
from fitrecord.routers.history import router as history_router
from fitrecord.routers.live import router as live_router
from fitrecord.db import SessionLocal, engine  # for healthz DB check
from fitrecord.errors import (
    InvalidRestDurationError, NotFoundError, SessionClosedError, SetMismatchError,
)
from fitrecord.services.orchestrator import LiveSessionRegistry
from fitrecord.settings import get_settings

log = logging.getLogger("uvicorn")

@asynccontextmanager
async def lifespan(app: FastAPI):
    s = get_settings()
    log.info("FitRecord starting env=%s version=%s", s.ENV, s.API_VERSION)
    app.state.live = LiveSessionRegistry(
        SessionLocal,
        rest_presets=s.REST_PRESETS,
        default_rest_seconds=s.DEFAULT_REST_SECONDS,
        tick_interval=s.TIMER_TICK_SECONDS,
    )
    yield
    # rest timers are not persisted; closing the views drops them
    await app.state.live.close_all()
    await engine.dispose()

app = FastAPI(
    title="FitRecord API",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "clients", "description": "Client records"},
        {"name": "exercises", "description": "Exercise library"},
        {"name": "sessions", "description": "Workout sessions"},
        {"name": "workout-exercises", "description": "Exercises assigned to a client in a session"},
        {"name": "sets", "description": "Sets per workout exercise"},
        {"name": "history", "description": "Personal records and past workouts"},
        {"name": "live", "description": "Live workout view: rest timers and client switching"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = get_settings().ALLOW_ORIGINS.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        log.exception("rid=%s %s %s failed", req_id, request.method, request.url.path)
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

@app.exception_handler(SessionClosedError)
async def session_closed_handler(request: Request, exc: SessionClosedError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

@app.exception_handler(SetMismatchError)
async def set_mismatch_handler(request: Request, exc: SetMismatchError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

@app.exception_handler(InvalidRestDurationError)
async def rest_duration_handler(request: Request, exc: InvalidRestDurationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "allowed": list(exc.presets)},
    )

@app.get("/")
def root():
    return {"ok": True, "name": "FitRecord API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
async def healthz():
    # Quick DB sanity check
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": get_settings().API_VERSION}

# Routers
app.include_router(clients_router)
app.include_router(exercises_router)
app.include_router(sessions_router)
app.include_router(workout_exercises_router)
app.include_router(sets_router)
app.include_router(history_router)
app.include_router(live_router)
