from datetime import datetime
from pydantic import BaseModel, Field

NICKNAME_MIN_LENGTH = 2
NICKNAME_MAX_LENGTH = 20


class Player(BaseModel):
    """Jugador del clicker. El id lo asigna el servicio en el primer login."""

    id: str = Field(..., alias="_id")
    nickname: str
    clicks: int = 0

    created_at: datetime

    class Config:
        populate_by_name = True


class PlayerLogin(BaseModel):
    nickname: str


class PlayerResponse(BaseModel):
    id: str
    nickname: str
    clicks: int
    created_at: datetime
