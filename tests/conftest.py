"""
Pytest fixtures and configuration for all tests.
"""

import os

# clicker.main reads Settings at import time
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

from datetime import datetime, timezone

import pytest

from tests.fakes import FakeClock, FakeDatabase, FakeStore


@pytest.fixture
def test_db():
    """Clean in-memory database per test."""
    return FakeDatabase()


@pytest.fixture
def make_player_doc():
    """Factory for raw player documents."""
    def _make(player_id, nickname, clicks=0):
        return {
            "_id": player_id,
            "nickname": nickname,
            "clicks": clicks,
            "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        }
    return _make


@pytest.fixture
def fake_store():
    """Recording stand-in for ClickerApiClient."""
    return FakeStore()


@pytest.fixture
def clock():
    """Manual clock to inject as `sleep=clock.sleep`."""
    return FakeClock()
