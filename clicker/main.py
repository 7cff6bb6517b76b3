"""
Entry point del servicio del clicker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from clicker.core.config import get_settings
from clicker.database import Database, create_indexes

from clicker.controllers.players_controller import router as players_router
from clicker.controllers.rpc_controller import router as rpc_router
from clicker.controllers.leaderboard_controller import router as leaderboard_router
from clicker.controllers.health_controller import router as health_router

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]


def is_allowed_origin(origin: str) -> bool:
    """Check if origin is in the configured list."""
    return bool(origin) and origin in CORS_ORIGINS


class CORSMiddleware(BaseHTTPMiddleware):
    """
    CORS middleware that answers OPTIONS preflight BEFORE routing.

    The beacon sent on page exit is a plain POST with a JSON body, so it
    only needs the response headers, never a preflight of its own.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            if not is_allowed_origin(origin):
                return Response(status_code=403, content="Origin not allowed")

            return Response(
                status_code=200,
                headers={
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
                    "Access-Control-Allow-Headers": "Content-Type, Accept, Origin",
                    "Access-Control-Max-Age": "86400",  # Cache preflight for 24 hours
                }
            )

        response = await call_next(request)

        if is_allowed_origin(origin):
            response.headers["Access-Control-Allow-Origin"] = origin

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    await create_indexes(Database.get_db())
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Clicker API",
    description="Store de jugadores y ranking para el clicker",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(CORSMiddleware)

app.include_router(health_router)
app.include_router(players_router)
app.include_router(rpc_router)
app.include_router(leaderboard_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Clicker API",
        "version": "1.0.0",
        "docs": "/docs"
    }
