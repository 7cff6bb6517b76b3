"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from clicker.main import app
from clicker.database import Database


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Points the Database holder at the in-memory test database. The ASGI
    transport does not run the lifespan, so no real MongoDB is contacted.
    """
    original_db = Database.db
    Database.db = test_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Restore original db
    Database.db = original_db


@pytest.fixture
async def player(test_db, make_player_doc):
    """A stored player with 10 clicks."""
    doc = make_player_doc("p1", "Kim", clicks=10)
    await test_db["players"].insert_one(doc)
    return doc
