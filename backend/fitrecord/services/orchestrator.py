"""Live workout view: set completion drives the per-client rest timers."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitrecord.errors import InvalidRestDurationError, NotFoundError, SetMismatchError
from fitrecord.models import ExerciseSet, WorkoutExercise
from fitrecord.repositories.exercise_repo import ExerciseRepository
from fitrecord.repositories.history_repo import ExerciseHistoryRow, HistoryRepository
from fitrecord.repositories.set_repo import SetRepository
from fitrecord.repositories.workout_exercise_repo import WorkoutExerciseRepository
from fitrecord.services.rest_timer import (
    AlertSignal, Clock, Overtime, RestTimerEngine, TimerDisplay,
)
from fitrecord.services.ticker import TimerTicker

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SetCompletion:
    set: ExerciseSet
    remaining_sets: int
    timer: TimerDisplay


@dataclass(slots=True)
class ClientView:
    """What the workout screen shows for the selected client."""
    client_id: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    last_workout: list[WorkoutExercise] = field(default_factory=list)
    max_weights: dict[str, float] = field(default_factory=dict)


class LiveWorkout:
    def __init__(
        self,
        session_id: str,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        rest_presets: tuple[int, ...],
        rest_seconds: int,
        tick_interval: float = 1.0,
        clock: Optional[Clock] = None,
    ):
        if rest_seconds not in rest_presets:
            raise InvalidRestDurationError(rest_seconds, rest_presets)
        self.session_id = session_id
        self.rest_presets = rest_presets
        self._sessions = session_factory
        self._alerts: deque[AlertSignal] = deque()
        engine_kwargs = {"clock": clock} if clock is not None else {}
        self.timers = RestTimerEngine(rest_seconds, on_alert=self._alerts.append, **engine_kwargs)
        self.ticker = TimerTicker(self.timers, interval=tick_interval, name=f"rest-timer:{session_id}")
        self.selected_client_id: Optional[str] = None
        self.view: Optional[ClientView] = None
        self._selection = 0

    # lifecycle
    def open(self) -> None:
        self.ticker.start()

    async def close(self) -> None:
        await self.ticker.stop()
        self.timers.clear_all()
        self._alerts.clear()

    # rest duration
    @property
    def rest_seconds(self) -> int:
        return self.timers.default_seconds

    def set_global_rest_duration(self, seconds: int) -> int:
        if seconds not in self.rest_presets:
            raise InvalidRestDurationError(seconds, self.rest_presets)
        self.timers.default_seconds = seconds
        log.info("session=%s global rest set to %ss", self.session_id, seconds)
        return seconds

    # events from the workout screen
    async def on_set_completed(self, set_id: str, exercise_id: str, client_id: str) -> SetCompletion:
        async with self._sessions() as db:
            sets = SetRepository(db)
            owner = await sets.owner(set_id)
            if owner is None:
                raise NotFoundError("Set", set_id)
            _, owner_client, owner_exercise, owner_session, _ = owner
            # a set from another session is invisible to this view
            if owner_session != self.session_id:
                raise NotFoundError("Set", set_id)
            if owner_client != client_id:
                raise SetMismatchError(set_id, "client", owner_client, client_id)
            if owner_exercise != exercise_id:
                raise SetMismatchError(set_id, "exercise", owner_exercise, exercise_id)
            done = await sets.mark_completed(set_id)
            remaining = await sets.count_incomplete(done.workout_exercise_id, excluding=set_id)
            exercise_rest = await ExerciseRepository(db).rest_seconds(exercise_id) if remaining else None

        if remaining:
            self.timers.start(client_id, exercise_id, exercise_rest_seconds=exercise_rest)
        else:
            self.timers.clear(client_id)
        log.debug("set=%s completed, %d left for exercise=%s", set_id, remaining, exercise_id)
        return SetCompletion(done, remaining, self.timers.display(client_id))

    def on_client_selected(self, client_id: str) -> TimerDisplay:
        """Switch tabs; picking a client whose rest is over acknowledges the alert."""
        if client_id != self.selected_client_id:
            self._selection += 1
            self.selected_client_id = client_id
            self.view = None
        if isinstance(self.timers.state(client_id), Overtime):
            self.timers.clear(client_id)
        return self.timers.display(client_id)

    def get_timer_display(self, client_id: str) -> TimerDisplay:
        return self.timers.display(client_id)

    def timer_displays(self) -> list[TimerDisplay]:
        return [self.timers.display(c) for c in self.timers.active_clients()]

    def drain_alerts(self) -> list[AlertSignal]:
        alerts = list(self._alerts)
        self._alerts.clear()
        return alerts

    # history
    async def get_max_weight(self, client_id: str, exercise_id: str) -> Optional[float]:
        async with self._sessions() as db:
            return await HistoryRepository(db).max_completed_weight(client_id, exercise_id)

    async def get_exercise_history(self, client_id: str) -> list[ExerciseHistoryRow]:
        async with self._sessions() as db:
            return await HistoryRepository(db).exercise_history(client_id)

    async def refresh_view(self) -> Optional[ClientView]:
        """Load the selected client's screen; results for a client no longer selected are dropped."""
        client_id, token = self.selected_client_id, self._selection
        if client_id is None:
            return None
        async with self._sessions() as db:
            exercises = await WorkoutExerciseRepository(db).list_for(self.session_id, client_id)
            history = HistoryRepository(db)
            last_workout = await history.last_completed_workout_exercises(client_id)
            weighted = [we.exercise_id for we in exercises if we.exercise and not we.exercise.is_bodyweight]
            max_weights = await history.max_weights(client_id, weighted)

        if token != self._selection:
            log.debug("discarding stale view for client=%s", client_id)
            return None
        self.view = ClientView(client_id, exercises, last_workout, max_weights)
        return self.view


class LiveSessionRegistry:
    """Open workout views, keyed by workout session id."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        rest_presets: tuple[int, ...],
        default_rest_seconds: int,
        tick_interval: float = 1.0,
        clock: Optional[Clock] = None,
    ):
        self._session_factory = session_factory
        self.rest_presets = rest_presets
        self.default_rest_seconds = default_rest_seconds
        self.tick_interval = tick_interval
        self._clock = clock
        self._live: dict[str, LiveWorkout] = {}

    def open(self, session_id: str, *, rest_seconds: Optional[int] = None) -> LiveWorkout:
        live = self._live.get(session_id)
        if live is not None:
            if rest_seconds is not None and rest_seconds != live.rest_seconds:
                live.set_global_rest_duration(rest_seconds)
            return live
        live = LiveWorkout(
            session_id,
            self._session_factory,
            rest_presets=self.rest_presets,
            rest_seconds=rest_seconds or self.default_rest_seconds,
            tick_interval=self.tick_interval,
            clock=self._clock,
        )
        live.open()
        self._live[session_id] = live
        log.info("live view opened session=%s", session_id)
        return live

    def get(self, session_id: str) -> LiveWorkout:
        live = self._live.get(session_id)
        if live is None:
            raise NotFoundError("Live session", session_id)
        return live

    async def close(self, session_id: str) -> None:
        live = self._live.pop(session_id, None)
        if live is None:
            raise NotFoundError("Live session", session_id)
        await live.close()
        log.info("live view closed session=%s", session_id)

    async def close_all(self) -> None:
        for session_id in list(self._live):
            await self.close(session_id)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._live

    def __len__(self) -> int:
        return len(self._live)
