"""
Controlador de jugadores - Login por nickname y consulta de jugador
"""

from fastapi import APIRouter, HTTPException, status

from clicker.core.dependencies import Database
from clicker.models.player import Player, PlayerLogin, PlayerResponse
from clicker.services.player_service import (
    PlayerService,
    InvalidNicknameError,
    NicknameTakenError,
    PlayerNotFoundError,
)

router = APIRouter(prefix="/players", tags=["players"])


def _to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(
        id=player.id,
        nickname=player.nickname,
        clicks=player.clicks,
        created_at=player.created_at
    )


@router.post("/login", response_model=PlayerResponse)
async def login(request: PlayerLogin, db: Database):
    """
    Login por nickname.

    Si el nickname ya existe se devuelve ese jugador (con sus clicks guardados),
    si no, se crea uno nuevo con 0 clicks.
    """
    player_service = PlayerService(db)

    try:
        player = await player_service.login(request.nickname)
    except InvalidNicknameError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except NicknameTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    return _to_response(player)


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(player_id: str, db: Database):
    """
    Devuelve un jugador con su total de clicks persistido.
    """
    player_service = PlayerService(db)

    try:
        player = await player_service.get_player(player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return _to_response(player)
