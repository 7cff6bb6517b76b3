"""
ClickerSession - one player's game session (the browser tab).

Wires one store client, the click flusher and the ranking poller to a shared
EventBus and owns their lifecycle:

    async with ClickerSession.from_settings() as session:
        session.events.subscribe(render)
        await session.login("Kim")
        session.click()
    # leaving the block is the page exit: pending clicks go out as a beacon
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from clicker.client.accumulator import AccumulatorFlusher
from clicker.client.events import EventBus
from clicker.client.leaderboard import PollingLeaderboard
from clicker.client.remote import ClickerApiClient
from clicker.core.config import ClientSettings, get_client_settings
from clicker.models.player import PlayerResponse

logger = logging.getLogger(__name__)


class ClickerSession:
    def __init__(
        self,
        store: ClickerApiClient,
        *,
        flush_interval: float = 2.0,
        poll_interval: float = 3.0,
        ranking_limit: int = 10,
        owns_store: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.store = store
        self.events = EventBus()
        self.clicker = AccumulatorFlusher(
            store,
            flush_interval=flush_interval,
            events=self.events,
            sleep=sleep
        )
        self.ranking = PollingLeaderboard(
            store,
            limit=ranking_limit,
            poll_interval=poll_interval,
            events=self.events,
            sleep=sleep
        )
        self.player: Optional[PlayerResponse] = None
        self._owns_store = owns_store
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "ClickerSession":
        """Build a session and its HTTP client from CLICKER_* settings."""
        settings = settings or get_client_settings()
        store = ClickerApiClient(
            settings.api_base_url,
            timeout=settings.http_timeout_seconds,
            beacon_timeout=settings.beacon_timeout_seconds
        )
        return cls(
            store,
            flush_interval=settings.flush_interval_seconds,
            poll_interval=settings.ranking_poll_interval_seconds,
            ranking_limit=settings.ranking_limit,
            owns_store=True
        )

    async def __aenter__(self) -> "ClickerSession":
        self.ranking.activate()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def login(self, nickname: str) -> PlayerResponse:
        """Log in (find-or-create) and start saving clicks for that player."""
        player = await self.store.login(nickname)
        self.player = player
        self.clicker.bind(player.id, player.clicks)
        logger.info(f"Logged in as {player.nickname} ({player.clicks} clicks)")
        return player

    def logout(self) -> None:
        self.clicker.unbind()
        self.player = None

    def click(self) -> None:
        self.clicker.increment()

    async def close(self) -> None:
        """Page exit: beacon the pending clicks, stop polling, release the client."""
        if self._closed:
            return
        self._closed = True

        self.clicker.teardown()
        self.ranking.deactivate()

        if self._owns_store:
            await self.store.aclose()
