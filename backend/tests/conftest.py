"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from factories import make_edge, make_node
from flowcanvas.db.database import close_database, init_database
from flowcanvas.main import app
from flowcanvas.models import WorkflowDefinition
from flowcanvas.services.editor_sessions import shutdown_session_manager


@pytest.fixture
def linear_definition() -> WorkflowDefinition:
    """T -> A -> B, laid out top to bottom."""
    return WorkflowDefinition(
        nodes=[
            make_node("T", "timer_trigger", y=0, intervalSeconds=60),
            make_node("A", "dexscreener_price", y=120),
            make_node("B", "log", y=240),
        ],
        edges=[make_edge("T", "A"), make_edge("A", "B")],
    )


@pytest.fixture
def branching_definition() -> WorkflowDefinition:
    """T -> A -> B and T -> C, where C has no outgoing edge."""
    return WorkflowDefinition(
        nodes=[
            make_node("T", "timer_trigger", x=260, y=0),
            make_node("A", "jupiter_quote", x=100, y=120),
            make_node("B", "log", x=100, y=240),
            make_node("C", "discord_webhook", x=400, y=120),
        ],
        edges=[make_edge("T", "A"), make_edge("A", "B"), make_edge("T", "C")],
    )


@pytest.fixture
async def test_db() -> AsyncGenerator[str, None]:
    """Set up a temporary database for a test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    await init_database(db_path)

    yield db_path

    # Clean up
    await close_database()
    await shutdown_session_manager()
    os.unlink(db_path)


@pytest.fixture
async def client(test_db: str) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
