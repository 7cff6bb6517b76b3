"""
PlayerRepository - MongoDB access for players collection.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from clicker.models.player import Player


class PlayerRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["players"]

    async def get_by_id(self, player_id: str) -> Optional[Player]:
        """Get player by ID."""
        doc = await self.collection.find_one({"_id": player_id})
        return Player(**doc) if doc else None

    async def get_by_nickname(self, nickname: str) -> Optional[Player]:
        """Get player by nickname (exact match)."""
        doc = await self.collection.find_one({"nickname": nickname})
        return Player(**doc) if doc else None

    async def create(self, nickname: str) -> Player:
        """
        Create a new player with zero clicks.

        Raises pymongo DuplicateKeyError if the nickname is already taken
        (unique index on nickname).
        """
        player_doc = {
            "_id": str(uuid.uuid4()),
            "nickname": nickname,
            "clicks": 0,
            "created_at": datetime.now(timezone.utc),
        }

        await self.collection.insert_one(player_doc)
        return Player(**player_doc)

    async def increment_clicks(self, player_id: str, amount: int) -> Optional[Player]:
        """
        Atomically add `amount` to the player's clicks.

        Uses $inc so concurrent increments from several sessions compose
        without a read-modify-write on the client.
        """
        result = await self.collection.find_one_and_update(
            {"_id": player_id},
            {"$inc": {"clicks": amount}},
            return_document=True
        )

        return Player(**result) if result else None

    async def get_top_players(self, limit: int = 10) -> list[Player]:
        """Players ordered by clicks (descending), at most `limit`."""
        cursor = self.collection.find({}).sort("clicks", -1).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [Player(**doc) for doc in docs]
