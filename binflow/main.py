"""
FastAPI Production Application

Main entry point for the BinFlow API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from binflow.config import get_settings
from binflow.database.connection import init_database, close_database
from binflow.serving.api import create_api_app
from binflow.shifts.errors import ConfigurationFailure

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    from binflow.config.logging import configure_logging
    configure_logging()

    settings = get_settings()
    logger.info("Starting BinFlow API", environment=settings.app_env, timezone=settings.business.timezone)

    # Without a database the API still starts; reads fall back to stand-in data
    try:
        await init_database()
        logger.info("Database initialized")
    except ConfigurationFailure as e:
        logger.warning("Database init failed, running degraded", error=e.message)

    yield

    logger.info("Shutting down...")
    await close_database()


app = create_api_app(lifespan=lifespan)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
