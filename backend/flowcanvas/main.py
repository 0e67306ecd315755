"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowcanvas.db.database import close_database, init_database
from flowcanvas.services.editor_sessions import init_session_manager, shutdown_session_manager

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup
    db_path = os.getenv("DATABASE_PATH", "./data/workflows.db")
    await init_database(db_path)
    logger.info(f"Opened workflow database at {db_path}")

    # Start editor session manager
    await init_session_manager()

    yield

    # Shutdown
    await shutdown_session_manager()
    await close_database()


app = FastAPI(
    title="Flow Canvas",
    description="Compose automation pipelines as graphs of typed steps",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - allow any localhost port for local frontends
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^http://localhost(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers after app is created to avoid circular imports
from flowcanvas.api import editor, steps, workflows  # noqa: E402

app.include_router(workflows.router, prefix="/api/v1", tags=["workflows"])
app.include_router(editor.router, prefix="/api/v1", tags=["editor"])
app.include_router(steps.router, prefix="/api/v1", tags=["steps"])
