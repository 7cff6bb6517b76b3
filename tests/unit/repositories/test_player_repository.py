"""
Unit tests for PlayerRepository
"""

import pytest
from pymongo.errors import DuplicateKeyError

from clicker.repositories.player_repository import PlayerRepository


class TestPlayerRepository:
    """Test suite for PlayerRepository database operations."""

    @pytest.mark.asyncio
    async def test_create_player(self, test_db):
        """New players start with zero clicks and a generated id."""
        repo = PlayerRepository(test_db)

        # Act
        player = await repo.create("Kim")

        # Assert
        assert player.nickname == "Kim"
        assert player.clicks == 0
        assert player.id
        assert player.created_at is not None

    @pytest.mark.asyncio
    async def test_create_duplicate_nickname(self, test_db):
        repo = PlayerRepository(test_db)
        await repo.create("Kim")

        with pytest.raises(DuplicateKeyError):
            await repo.create("Kim")

    @pytest.mark.asyncio
    async def test_get_by_id_and_nickname(self, test_db):
        repo = PlayerRepository(test_db)
        created = await repo.create("Lee")

        by_id = await repo.get_by_id(created.id)
        by_nickname = await repo.get_by_nickname("Lee")

        assert by_id.id == created.id
        assert by_nickname.id == created.id

    @pytest.mark.asyncio
    async def test_get_not_found(self, test_db):
        repo = PlayerRepository(test_db)

        assert await repo.get_by_id("non_existent_id") is None
        assert await repo.get_by_nickname("nobody") is None

    @pytest.mark.asyncio
    async def test_increment_clicks_adds(self, test_db, make_player_doc):
        await test_db["players"].insert_one(make_player_doc("p1", "Kim", clicks=10))
        repo = PlayerRepository(test_db)

        # Act
        first = await repo.increment_clicks("p1", 5)
        second = await repo.increment_clicks("p1", 2)

        # Assert: adds, never overwrites
        assert first.clicks == 15
        assert second.clicks == 17

    @pytest.mark.asyncio
    async def test_increment_unknown_player(self, test_db):
        repo = PlayerRepository(test_db)

        assert await repo.increment_clicks("ghost", 3) is None

    @pytest.mark.asyncio
    async def test_top_players_ordered_and_limited(self, test_db, make_player_doc):
        for i, clicks in enumerate([5, 50, 20, 80, 1]):
            await test_db["players"].insert_one(make_player_doc(f"p{i}", f"player{i}", clicks))
        repo = PlayerRepository(test_db)

        top = await repo.get_top_players(limit=3)

        assert [p.clicks for p in top] == [80, 50, 20]
