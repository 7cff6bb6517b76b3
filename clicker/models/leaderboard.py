from pydantic import BaseModel


class RankingEntry(BaseModel):
    """Fila del ranking: lo que devuelve GET /leaderboard y lo que guarda el cliente"""

    id: str
    nickname: str
    clicks: int
