"""
PollingLeaderboard - keeps a TOP N ranking fresh by polling the store.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from clicker.client.events import EventBus, RankingFailed, RankingUpdated
from clicker.client.scheduler import PeriodicTimer
from clicker.models.leaderboard import RankingEntry

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 3.0
DEFAULT_LIMIT = 10


class RankingStore(Protocol):
    async def fetch_top_players(self, limit: int = DEFAULT_LIMIT) -> list[RankingEntry]: ...


class PollingLeaderboard:
    def __init__(
        self,
        store: RankingStore,
        *,
        limit: int = DEFAULT_LIMIT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        events: Optional[EventBus] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.store = store
        self.limit = limit
        self.poll_interval = poll_interval
        self.events = events or EventBus()
        self._sleep = sleep

        self.snapshot: list[RankingEntry] = []
        self.loading = True
        self.error_message: Optional[str] = None

        self._timer: Optional[PeriodicTimer] = None
        self._generation = 0
        self._deactivated = False

    @property
    def active(self) -> bool:
        return self._timer is not None

    @property
    def timer(self) -> Optional[PeriodicTimer]:
        return self._timer

    def activate(self) -> None:
        """Fetch now, then every poll interval until deactivate()."""
        if self.active:
            return

        self._timer = PeriodicTimer(
            self.poll_interval,
            self.refresh,
            name="ranking-poll",
            run_immediately=True,
            sleep=self._sleep
        )
        self._deactivated = False
        self._timer.start()

    def deactivate(self) -> None:
        if self._timer is None:
            return

        self._timer.cancel()
        self._timer = None
        self._generation += 1
        self._deactivated = True

    async def refresh(self) -> None:
        """
        Fetch the ranking once.

        On failure the previous snapshot is kept and error_message is set,
        stale rows are better than an empty board. Once deactivated the board
        is frozen: refresh() does nothing until the next activate().
        """
        if self._deactivated:
            return

        generation = self._generation
        try:
            entries = await self.store.fetch_top_players(self.limit)
        except Exception as e:
            if generation != self._generation:
                return
            self.error_message = str(e) or type(e).__name__
            logger.warning(f"Ranking fetch failed: {self.error_message}")
            self.events.publish(RankingFailed(message=self.error_message))
        else:
            if generation != self._generation:
                return
            # Keep the store's order, ties included
            self.snapshot = list(entries)[:self.limit]
            self.error_message = None
            self.events.publish(RankingUpdated(entries=list(self.snapshot)))
        finally:
            if generation == self._generation:
                self.loading = False
