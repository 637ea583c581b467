"""Per-client rest timers, derived from start time and duration on every read."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

log = logging.getLogger(__name__)

Clock = Callable[[], float]

# Haptic pattern (ms on/off) and tone the UI plays when rest is over
VIBRATION_PATTERN: tuple[int, ...] = (200, 100, 200, 100, 400)
TONE_HZ = 880
TONE_MS = 350


class TimerPhase(str, Enum):
    idle = "idle"
    resting = "resting"
    overtime = "overtime"


@dataclass(frozen=True, slots=True)
class Idle:
    phase = TimerPhase.idle


@dataclass(frozen=True, slots=True)
class Resting:
    started_at: float
    duration: int
    exercise_id: str
    remaining: int
    phase = TimerPhase.resting


@dataclass(frozen=True, slots=True)
class Overtime:
    started_at: float
    duration: int
    exercise_id: str
    overtime: int
    phase = TimerPhase.overtime


TimerState = Union[Idle, Resting, Overtime]

IDLE = Idle()


@dataclass(frozen=True, slots=True)
class TimerDisplay:
    client_id: str
    state: TimerPhase
    seconds: int
    text: str
    exercise_id: Optional[str] = None
    duration: Optional[int] = None


@dataclass(frozen=True, slots=True)
class AlertSignal:
    client_id: str
    exercise_id: str
    fired_at: float
    vibration_pattern: tuple[int, ...] = VIBRATION_PATTERN
    tone_hz: int = TONE_HZ
    tone_ms: int = TONE_MS


@dataclass(slots=True)
class _Timer:
    started_at: float
    duration: int
    exercise_id: str
    alerted: bool = field(default=False)


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


class RestTimerEngine:
    def __init__(
        self,
        default_seconds: int,
        *,
        clock: Clock = time.time,
        on_alert: Optional[Callable[[AlertSignal], None]] = None,
    ):
        self.default_seconds = default_seconds
        self._clock = clock
        self._on_alert = on_alert
        self._timers: dict[str, _Timer] = {}

    def resolve_duration(self, exercise_rest_seconds: Optional[int]) -> int:
        if exercise_rest_seconds:
            return exercise_rest_seconds
        return self.default_seconds

    def start(self, client_id: str, exercise_id: str, *, exercise_rest_seconds: Optional[int] = None) -> TimerState:
        duration = self.resolve_duration(exercise_rest_seconds)
        self._timers[client_id] = _Timer(self._clock(), duration, exercise_id)
        log.info("rest timer started client=%s exercise=%s duration=%ss", client_id, exercise_id, duration)
        return self.state(client_id)

    def clear(self, client_id: str) -> bool:
        removed = self._timers.pop(client_id, None) is not None
        if removed:
            log.info("rest timer cleared client=%s", client_id)
        return removed

    def clear_all(self) -> None:
        self._timers.clear()

    def active_clients(self) -> list[str]:
        return list(self._timers)

    def state(self, client_id: str) -> TimerState:
        timer = self._timers.get(client_id)
        if timer is None:
            return IDLE
        return self._evaluate(timer, self._clock())

    @staticmethod
    def _evaluate(timer: _Timer, now: float) -> TimerState:
        elapsed = max(now - timer.started_at, 0.0)
        if elapsed >= timer.duration:
            return Overtime(timer.started_at, timer.duration, timer.exercise_id, int(elapsed - timer.duration))
        return Resting(timer.started_at, timer.duration, timer.exercise_id, math.ceil(timer.duration - elapsed))

    def display(self, client_id: str) -> TimerDisplay:
        st = self.state(client_id)
        if isinstance(st, Resting):
            return TimerDisplay(client_id, st.phase, st.remaining, format_clock(st.remaining),
                                st.exercise_id, st.duration)
        if isinstance(st, Overtime):
            return TimerDisplay(client_id, st.phase, st.overtime, "+" + format_clock(st.overtime),
                                st.exercise_id, st.duration)
        return TimerDisplay(client_id, TimerPhase.idle, 0, "")

    def tick(self) -> list[AlertSignal]:
        """Re-evaluate every timer; fire the alert for timers that just went over."""
        now = self._clock()
        fired: list[AlertSignal] = []
        for client_id, timer in self._timers.items():
            if timer.alerted or now - timer.started_at < timer.duration:
                continue
            timer.alerted = True
            signal = AlertSignal(client_id, timer.exercise_id, now)
            fired.append(signal)
            log.info("rest over client=%s exercise=%s", client_id, timer.exercise_id)
        if self._on_alert is not None:
            for signal in fired:
                self._on_alert(signal)
        return fired
