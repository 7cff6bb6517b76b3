"""
Controlador de salud - Estado del servicio y del almacén de jugadores
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from clicker.database import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Hace ping al almacén de jugadores.
    Responde 200 también cuando el ping falla: el estado va en `database`.
    """
    try:
        await Database.get_db().command("ping")
        db_status = "connected"
    except (RuntimeError, PyMongoError) as e:
        logger.warning(f"Health ping failed: {e}")
        db_status = "disconnected"

    return HealthResponse(status="ok", database=db_status)
