"""
Unit tests for PollingLeaderboard
"""

import asyncio

import pytest

from clicker.client.events import RankingFailed, RankingUpdated
from clicker.client.leaderboard import PollingLeaderboard
from clicker.models.leaderboard import RankingEntry
from tests.fakes import settle


def _entries(*rows):
    return [RankingEntry(id=i, nickname=n, clicks=c) for i, n, c in rows]


class TestRefresh:
    """Single fetch semantics."""

    @pytest.mark.asyncio
    async def test_initial_state(self, fake_store):
        board = PollingLeaderboard(fake_store)

        assert board.snapshot == []
        assert board.loading is True
        assert board.error_message is None

    @pytest.mark.asyncio
    async def test_refresh_keeps_store_order(self, fake_store):
        fake_store.ranking = _entries(("a", "Kim", 100), ("b", "Lee", 80))
        board = PollingLeaderboard(fake_store)

        await board.refresh()

        assert [e.id for e in board.snapshot] == ["a", "b"]
        assert board.snapshot[0].nickname == "Kim"
        assert board.loading is False
        assert fake_store.fetches == [10]

    @pytest.mark.asyncio
    async def test_refresh_does_not_resort(self, fake_store):
        # Store order wins, even if it is not sorted the way we would sort it
        fake_store.ranking = _entries(("b", "Lee", 80), ("a", "Kim", 100))
        board = PollingLeaderboard(fake_store)

        await board.refresh()

        assert [e.id for e in board.snapshot] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_empty_result_clears_error(self, fake_store):
        board = PollingLeaderboard(fake_store)
        board.error_message = "previous failure"
        board.snapshot = _entries(("a", "Kim", 100))

        await board.refresh()

        assert board.snapshot == []
        assert board.error_message is None

    @pytest.mark.asyncio
    async def test_failure_keeps_stale_snapshot(self, fake_store):
        fake_store.ranking = _entries(("a", "Kim", 100))
        board = PollingLeaderboard(fake_store)
        await board.refresh()

        fake_store.fail_next_fetches = 1
        await board.refresh()  # does not raise

        assert [e.id for e in board.snapshot] == ["a"]
        assert board.error_message == "store unreachable"
        assert board.loading is False

    @pytest.mark.asyncio
    async def test_first_refresh_failure_ends_loading(self, fake_store):
        fake_store.fail_next_fetches = 1
        board = PollingLeaderboard(fake_store)

        await board.refresh()

        assert board.loading is False
        assert board.snapshot == []
        assert board.error_message == "store unreachable"

    @pytest.mark.asyncio
    async def test_snapshot_capped_at_limit(self, fake_store):
        board = PollingLeaderboard(fake_store, limit=2)
        fake_store.ranking = _entries(("a", "A", 3), ("b", "B", 2), ("c", "C", 1))

        await board.refresh()

        assert len(board.snapshot) == 2

    @pytest.mark.asyncio
    async def test_refresh_publishes_events(self, fake_store):
        board = PollingLeaderboard(fake_store)
        received = []
        board.events.subscribe(received.append, RankingUpdated, RankingFailed)
        fake_store.ranking = _entries(("a", "Kim", 1))

        await board.refresh()
        fake_store.fail_next_fetches = 1
        await board.refresh()
        await asyncio.sleep(0)

        assert isinstance(received[0], RankingUpdated)
        assert received[0].entries[0].id == "a"
        assert received[1] == RankingFailed(message="store unreachable")


class TestPolling:
    """Activation lifecycle."""

    @pytest.mark.asyncio
    async def test_activate_fetches_immediately(self, fake_store, clock):
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)

        board.activate()
        await settle()

        assert len(fake_store.fetches) == 1
        assert board.loading is False
        board.deactivate()

    @pytest.mark.asyncio
    async def test_polls_on_interval(self, fake_store, clock):
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)

        board.activate()
        await clock.advance(9.0)
        board.deactivate()

        # Immediate fetch plus one per elapsed interval
        assert len(fake_store.fetches) == 4

    @pytest.mark.asyncio
    async def test_deactivate_stops_polling(self, fake_store, clock):
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)
        board.activate()
        await clock.advance(6.0)
        assert len(fake_store.fetches) == 3

        board.deactivate()
        await clock.advance(30.0)

        assert len(fake_store.fetches) == 3
        assert board.active is False
        assert clock.sleeping == 0

    @pytest.mark.asyncio
    async def test_result_after_deactivate_is_discarded(self, fake_store, clock):
        fake_store.gate = asyncio.Event()
        fake_store.ranking = _entries(("a", "Kim", 1))
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)

        board.activate()
        await settle()
        board.deactivate()
        fake_store.gate.set()
        await settle()

        assert board.snapshot == []
        assert board.loading is True

    @pytest.mark.asyncio
    async def test_refresh_after_deactivate_is_noop(self, fake_store, clock):
        fake_store.gate = asyncio.Event()
        fake_store.ranking = _entries(("a", "Kim", 1))
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)
        received = []
        board.events.subscribe(received.append, RankingUpdated, RankingFailed)

        board.activate()
        board.deactivate()
        fake_store.gate.set()
        await board.refresh()
        await settle()

        assert board.snapshot == []
        assert board.loading is True
        assert board.error_message is None
        assert fake_store.fetches == []
        assert received == []

    @pytest.mark.asyncio
    async def test_reactivate_resumes_refresh(self, fake_store, clock):
        fake_store.ranking = _entries(("a", "Kim", 1))
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)
        board.activate()
        board.deactivate()

        board.activate()
        await settle()

        assert board.snapshot[0].id == "a"
        assert board.loading is False
        board.deactivate()

    @pytest.mark.asyncio
    async def test_manual_refresh_outside_timer(self, fake_store, clock):
        board = PollingLeaderboard(fake_store, poll_interval=3.0, sleep=clock.sleep)
        board.activate()
        await settle()

        fake_store.ranking = _entries(("z", "New", 5))
        await board.refresh()

        assert board.snapshot[0].id == "z"
        assert len(fake_store.fetches) == 2
        board.deactivate()
