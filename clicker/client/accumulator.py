"""
AccumulatorFlusher - instant click feedback with batched persistence.

Clicks bump a local counter right away and pile up in `pending_delta`.
Every flush interval the pending amount is sent to the store as one atomic
increment. On page exit whatever is left goes out as a best-effort beacon.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from clicker.client.events import ClicksChanged, EventBus, SavingChanged
from clicker.client.scheduler import PeriodicTimer

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL = 2.0


class ScoreStore(Protocol):
    async def increment_score(self, player_id: str, amount: int) -> int: ...

    def send_beacon(self, player_id: str, amount: int) -> None: ...


class AccumulatorFlusher:
    def __init__(
        self,
        store: ScoreStore,
        *,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        events: Optional[EventBus] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.store = store
        self.flush_interval = flush_interval
        self.events = events or EventBus()
        self._sleep = sleep

        self.player_id: Optional[str] = None
        self.displayed_count = 0
        self.pending_delta = 0

        self._flushes_in_flight = 0
        self._timer: Optional[PeriodicTimer] = None
        # Bumped whenever the identity changes or the component is torn down.
        # A flush that resumes with an older generation throws its result away.
        self._generation = 0
        self._closed = False

    @property
    def flushing(self) -> bool:
        return self._flushes_in_flight > 0

    @property
    def timer(self) -> Optional[PeriodicTimer]:
        return self._timer

    def bind(self, player_id: Optional[str], initial_clicks: int = 0) -> None:
        """
        Bind a player identity (login) with its last persisted click total.

        Same player again: only the displayed count is reset, pending clicks
        stay. Different player: the previous player's pending clicks go out
        as a beacon attributed to that player, and the new player starts
        with nothing pending.
        """
        if self._closed:
            raise RuntimeError("AccumulatorFlusher was torn down")

        if player_id is not None and player_id == self.player_id:
            self.displayed_count = initial_clicks
            self._publish_clicks()
            return

        self._release_identity()

        self.player_id = player_id
        self.displayed_count = initial_clicks
        self._publish_clicks()

        if player_id is not None:
            self._timer = PeriodicTimer(
                self.flush_interval,
                self.flush,
                name=f"flush-{player_id}",
                sleep=self._sleep
            )
            self._timer.start()

    def unbind(self) -> None:
        """Drop the identity (logout). Stops the periodic flush."""
        self.bind(None)

    def increment(self) -> None:
        self.displayed_count += 1
        self.pending_delta += 1
        self._publish_clicks()

    async def flush(self) -> None:
        """
        Send the pending clicks as one increment.

        The pending amount is taken and zeroed before the request starts, so
        clicks that arrive while it is in flight go to the next flush. If the
        request fails, the taken amount is added back on top of whatever
        accumulated meanwhile and the next cycle retries it. Nothing is raised.

        There is no idempotency key: if the store applied the increment but
        the response was lost (e.g. a timeout), the retry counts it twice.
        """
        if not self.player_id or self.pending_delta == 0:
            return

        generation = self._generation
        player_id = self.player_id
        amount = self.pending_delta
        self.pending_delta = 0

        self._set_flushing(+1)
        try:
            await self.store.increment_score(player_id, amount)
        except Exception as e:
            if generation != self._generation:
                logger.warning(f"Flush of {amount} clicks for {player_id} failed after release, dropped: {e}")
                return
            self.pending_delta += amount
            logger.error(f"Click save failed for {player_id}, {amount} clicks queued for retry: {e}")
        finally:
            if generation == self._generation:
                self._set_flushing(-1)

    def teardown(self) -> None:
        """
        Page-exit path. Sends what is pending as a beacon and stops the timer.

        The beacon bypasses the flush bookkeeping: nothing waits for it and a
        lost beacon is lost. Calling teardown twice sends nothing the second
        time.
        """
        if self._closed:
            return

        self._release_identity()
        self._closed = True

    def _release_identity(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self.player_id is not None and self.pending_delta > 0:
            logger.info(f"Sending beacon for {self.player_id}: {self.pending_delta} clicks")
            self.store.send_beacon(self.player_id, self.pending_delta)

        was_flushing = self.flushing
        self._generation += 1
        self.pending_delta = 0
        self._flushes_in_flight = 0
        self.player_id = None
        # Flushes of the old generation never reach _set_flushing(-1)
        if was_flushing:
            self.events.publish(SavingChanged(flushing=False))

    def _set_flushing(self, step: int) -> None:
        was_flushing = self.flushing
        self._flushes_in_flight += step
        if self.flushing != was_flushing:
            self.events.publish(SavingChanged(flushing=self.flushing))

    def _publish_clicks(self) -> None:
        self.events.publish(
            ClicksChanged(displayed_count=self.displayed_count, pending_delta=self.pending_delta)
        )
