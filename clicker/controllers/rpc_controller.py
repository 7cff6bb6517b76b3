"""
Controlador RPC - Suma atómica de clicks

Es el endpoint al que apunta tanto el guardado periódico del cliente como
el beacon que se manda al salir de la página. El beacon no lee la respuesta,
así que el cuerpo es JSON plano y no requiere headers especiales.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from clicker.core.dependencies import Database
from clicker.services.player_service import (
    PlayerService,
    PlayerNotFoundError,
    InvalidIncrementError,
)

router = APIRouter(prefix="/rpc", tags=["rpc"])


class IncrementClicksRequest(BaseModel):
    player_id: str
    click_count: int = Field(..., ge=1)


class IncrementClicksResponse(BaseModel):
    player_id: str
    clicks: int  # Total después de sumar


@router.post("/increment_clicks", response_model=IncrementClicksResponse)
async def increment_clicks(request: IncrementClicksRequest, db: Database):
    """
    Suma `click_count` a los clicks del jugador en una sola operación ($inc).

    Varias sesiones del mismo jugador pueden llamar a la vez sin pisarse.
    """
    player_service = PlayerService(db)

    try:
        player = await player_service.increment_clicks(request.player_id, request.click_count)
    except PlayerNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InvalidIncrementError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    return IncrementClicksResponse(player_id=player.id, clicks=player.clicks)
