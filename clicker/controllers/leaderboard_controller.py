"""
Controlador de leaderboard - TOP N por clicks

Los clientes hacen polling aquí cada pocos segundos.
"""

from fastapi import APIRouter, HTTPException, Query, status

from clicker.core.dependencies import AppSettings, Database
from clicker.models.leaderboard import RankingEntry
from clicker.services.leaderboard_service import LeaderboardService, InvalidLimitError


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[RankingEntry])
async def get_leaderboard(
    db: Database,
    settings: AppSettings,
    limit: int = Query(10, description="Number of players to return")
):
    """
    Obtener el ranking: jugadores ordenados por clicks (de mayor a menor).

    El orden de la respuesta es el del ranking, el cliente no debe reordenar.
    El rango de `limit` lo valida el servicio (400 fuera de 1..max).
    """
    leaderboard_service = LeaderboardService(db, max_limit=settings.leaderboard_max_limit)

    try:
        return await leaderboard_service.get_top_players(limit)
    except InvalidLimitError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
