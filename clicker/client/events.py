"""
EventBus - typed state-change events for the display layer.

Components publish, the display layer subscribes. Handlers run on the same
event loop as the timers, one at a time, so they can read component state
without locking. Cancelling a Subscription stops delivery immediately, even
for events already queued.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from clicker.models.leaderboard import RankingEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClicksChanged:
    displayed_count: int
    pending_delta: int


@dataclass(frozen=True)
class SavingChanged:
    flushing: bool


@dataclass(frozen=True)
class RankingUpdated:
    entries: list[RankingEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RankingFailed:
    message: str


Event = ClicksChanged | SavingChanged | RankingUpdated | RankingFailed
Handler = Callable[[Event], None]


class Subscription:
    """Handle returned by EventBus.subscribe. cancel() is the cancellation token."""

    def __init__(self, bus: "EventBus", subscription_id: int, handler: Handler, event_types: tuple):
        self._bus = bus
        self.id = subscription_id
        self.handler = handler
        self.event_types = event_types
        self.cancelled = False

    def accepts(self, event: Event) -> bool:
        return not self.event_types or isinstance(event, self.event_types)

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._bus._remove(self.id)


class EventBus:
    def __init__(self):
        self._subscriptions: dict[int, Subscription] = {}
        self._ids = itertools.count(1)

    def subscribe(self, handler: Handler, *event_types: type) -> Subscription:
        """
        Register a handler. With event_types, only those event classes are
        delivered to it.
        """
        subscription = Subscription(self, next(self._ids), handler, event_types)
        self._subscriptions[subscription.id] = subscription
        return subscription

    def publish(self, event: Event) -> None:
        loop = _running_loop()

        for subscription in list(self._subscriptions.values()):
            if not subscription.accepts(event):
                continue
            if loop is not None:
                loop.call_soon(self._deliver, subscription, event)
            else:
                self._deliver(subscription, event)

    def _remove(self, subscription_id: int) -> None:
        self._subscriptions.pop(subscription_id, None)

    @staticmethod
    def _deliver(subscription: Subscription, event: Event) -> None:
        if subscription.cancelled:
            return
        try:
            subscription.handler(event)
        except Exception:
            logger.exception(f"Event handler failed for {type(event).__name__}")


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
