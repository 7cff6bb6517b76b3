"""
LeaderboardService - Serves the TOP N ranking by clicks.

The ranking is read straight from the players collection on every request.
Clients poll it every few seconds, so the query relies on the clicks index.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from clicker.models.leaderboard import RankingEntry
from clicker.repositories.player_repository import PlayerRepository


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class InvalidLimitError(LeaderboardServiceError):
    """Raised when the requested ranking size is out of range."""
    pass


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase, max_limit: int = 100):
        self.player_repo = PlayerRepository(db)
        self.max_limit = max_limit

    async def get_top_players(self, limit: int = 10) -> list[RankingEntry]:
        """
        Get the top `limit` players ordered by clicks (descending).

        Ties keep whatever order the database returns.
        """
        if limit < 1 or limit > self.max_limit:
            raise InvalidLimitError(f"limit must be between 1 and {self.max_limit}")

        players = await self.player_repo.get_top_players(limit)

        return [
            RankingEntry(id=p.id, nickname=p.nickname, clicks=p.clicks)
            for p in players
        ]

