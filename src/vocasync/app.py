"""Application factory."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vocasync.api import sync, system
from vocasync.models.base import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    logger.info("Database initialized")
    yield
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers mounted."""
    app = FastAPI(title="vocasync", version="0.1.0", lifespan=lifespan)
    app.include_router(sync.router, prefix="/sync", tags=["sync"])
    app.include_router(system.router, tags=["system"])
    return app
