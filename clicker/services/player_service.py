"""
PlayerService - Nickname login and click persistence.

Login is a find-or-create on the nickname, there is no password.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from clicker.repositories.player_repository import PlayerRepository
from clicker.models.player import Player, NICKNAME_MIN_LENGTH, NICKNAME_MAX_LENGTH

logger = logging.getLogger(__name__)


class PlayerServiceError(Exception):
    """Base exception for player service errors."""
    pass


class InvalidNicknameError(PlayerServiceError):
    """Raised when the nickname is empty or outside the allowed length."""
    pass


class NicknameTakenError(PlayerServiceError):
    """Raised when another login created the same nickname first."""
    pass


class PlayerNotFoundError(PlayerServiceError):
    """Raised when the player does not exist."""
    pass


class InvalidIncrementError(PlayerServiceError):
    """Raised when a click increment is not a positive integer."""
    pass


def normalize_nickname(nickname: str) -> str:
    """Trim the nickname and check its length. Returns the trimmed value."""
    trimmed = nickname.strip()
    if not trimmed:
        raise InvalidNicknameError("Nickname is required")

    if len(trimmed) < NICKNAME_MIN_LENGTH or len(trimmed) > NICKNAME_MAX_LENGTH:
        raise InvalidNicknameError(
            f"Nickname must be between {NICKNAME_MIN_LENGTH} and {NICKNAME_MAX_LENGTH} characters"
        )

    return trimmed


class PlayerService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.player_repo = PlayerRepository(db)

    async def login(self, nickname: str) -> Player:
        """
        Log in with a nickname.

        1. Validates and trims the nickname
        2. Returns the existing player with that nickname
        3. Otherwise creates a new player with zero clicks

        Raises InvalidNicknameError, NicknameTakenError
        """
        nickname = normalize_nickname(nickname)

        player = await self.player_repo.get_by_nickname(nickname)
        if player is not None:
            return player

        try:
            player = await self.player_repo.create(nickname)
        except DuplicateKeyError:
            # Another login inserted the same nickname between our read and insert
            raise NicknameTakenError(f"Nickname '{nickname}' is already in use")

        logger.info(f"New player created: {nickname} ({player.id})")
        return player

    async def get_player(self, player_id: str) -> Player:
        player = await self.player_repo.get_by_id(player_id)
        if not player:
            raise PlayerNotFoundError(f"Player {player_id} not found")
        return player

    async def increment_clicks(self, player_id: str, amount: int) -> Player:
        """
        Add a batch of clicks to a player's total.

        The add happens server side in one atomic update. Returns the player
        with the new total.
        """
        if amount < 1:
            raise InvalidIncrementError("click_count must be a positive integer")

        player = await self.player_repo.increment_clicks(player_id, amount)
        if not player:
            raise PlayerNotFoundError(f"Player {player_id} not found")

        logger.debug(f"+{amount} clicks for {player_id} (total {player.clicks})")
        return player
