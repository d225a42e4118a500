"""
FastAPI Application Factory

Creates and configures the API application.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from binflow.config import get_settings
from binflow.serving.api.errors import register_exception_handlers
from binflow.serving.api.middleware import RequestLoggingMiddleware
from binflow.serving.api.routes import (
    health_router,
    production_events_router,
    shift_aggregates_router,
    dashboard_router,
)

API_PREFIX = "/api/v1"


def create_api_app(lifespan=None, title: Optional[str] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager (startup/shutdown)
        title: Override for the OpenAPI title

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title=title or "BinFlow Production API",
        description="Shift reports and bin tipping tracking",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX, tags=["Health"])
    app.include_router(production_events_router, prefix=f"{API_PREFIX}/production-events", tags=["Production Events"])
    app.include_router(shift_aggregates_router, prefix=f"{API_PREFIX}/shift-aggregates", tags=["Shift Aggregates"])
    app.include_router(dashboard_router, prefix=f"{API_PREFIX}/dashboard", tags=["Dashboard"])

    @app.get(f"{API_PREFIX}/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": app.title,
            "version": settings.version,
            "environment": settings.app_env,
            "timezone": settings.business.timezone,
            "documentation": app.docs_url,
        }

    return app
