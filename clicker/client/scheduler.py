"""
PeriodicTimer - setInterval for the asyncio event loop.

Each tick fires the callback as its own task, the timer does not wait for the
previous firing to finish. Cancelling stops future ticks right away; firings
already in flight are allowed to complete.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    IDLE = "idle"            # not armed
    SCHEDULED = "scheduled"  # armed, waiting for the next tick
    IN_FLIGHT = "in_flight"  # armed, at least one firing outstanding


class PeriodicTimer:
    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        *,
        name: str = "timer",
        run_immediately: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.interval = interval
        self.callback = callback
        self.name = name
        self.run_immediately = run_immediately
        self._sleep = sleep

        self._task: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self._cancelled = False
        self.fire_count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._cancelled

    @property
    def state(self) -> TimerState:
        if not self.running:
            return TimerState.IDLE
        if self._in_flight:
            return TimerState.IN_FLIGHT
        return TimerState.SCHEDULED

    def start(self) -> None:
        """Arm the timer on the running loop. Calling it twice is a no-op."""
        if self.running:
            return

        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"{self.name}-loop")
        logger.debug(f"{self.name}: armed every {self.interval}s")

    def cancel(self) -> None:
        """Stop ticking. No firing happens after this returns."""
        if self._task is None:
            return

        self._cancelled = True
        self._task.cancel()
        self._task = None
        logger.debug(f"{self.name}: cancelled")

    async def wait_in_flight(self) -> None:
        """Wait for firings that already started."""
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _run(self) -> None:
        if self.run_immediately:
            self._fire()

        while True:
            await self._sleep(self.interval)
            if self._cancelled:
                return
            self._fire()

    def _fire(self) -> None:
        self.fire_count += 1
        task = asyncio.get_running_loop().create_task(self._invoke(), name=f"{self.name}-tick")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _invoke(self) -> None:
        try:
            await self.callback()
        except Exception:
            # A failed tick must not stop the next ones
            logger.exception(f"{self.name}: tick failed")
