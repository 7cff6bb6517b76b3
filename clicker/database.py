"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from clicker.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Holder de la conexión a MongoDB (una por proceso)"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info(f"✅ Connected to MongoDB: {settings.mongodb_db_name}")

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("❌ Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/players/{player_id}")
        async def get_player(player_id: str, db: Database):
            service = PlayerService(db)
            return await service.get_player(player_id)
    """
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (idempotente, se corre al arrancar)
# ============================================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Crea los índices que necesita la colección de jugadores.

    - nickname único: dos logins simultáneos con el mismo nickname no pueden
      crear dos jugadores
    - clicks descendente: el ranking ordena por aquí en cada polling
    """
    await db.players.create_index("nickname", unique=True)
    await db.players.create_index([("clicks", -1)])

    logger.info("✅ Indexes created successfully")
