from .player import Player, PlayerLogin, PlayerResponse
from .leaderboard import RankingEntry

__all__ = [
    "Player",
    "PlayerLogin",
    "PlayerResponse",
    "RankingEntry",
]
