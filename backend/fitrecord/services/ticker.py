"""Background loop that drives :meth:`RestTimerEngine.tick` for one live view."""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

from fitrecord.services.rest_timer import RestTimerEngine

log = logging.getLogger(__name__)


class TimerTicker:
    def __init__(self, engine: RestTimerEngine, *, interval: float = 1.0, name: str = "rest-timer"):
        self.engine = engine
        self.interval = interval
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    async def _run(self) -> None:
        while True:
            self.engine.tick()
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        log.debug("ticker %s stopped", self.name)
