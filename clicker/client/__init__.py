from .accumulator import AccumulatorFlusher
from .events import (
    ClicksChanged,
    EventBus,
    RankingFailed,
    RankingUpdated,
    SavingChanged,
    Subscription,
)
from .leaderboard import PollingLeaderboard
from .remote import ClickerApiClient, RemoteStoreError
from .scheduler import PeriodicTimer, TimerState
from .session import ClickerSession

__all__ = [
    "AccumulatorFlusher",
    "ClickerApiClient",
    "ClickerSession",
    "ClicksChanged",
    "EventBus",
    "PeriodicTimer",
    "PollingLeaderboard",
    "RankingFailed",
    "RankingUpdated",
    "RemoteStoreError",
    "SavingChanged",
    "Subscription",
    "TimerState",
]
