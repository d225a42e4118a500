"""
API Routes Module
"""
from .health import router as health_router
from .production_events import router as production_events_router
from .shift_aggregates import router as shift_aggregates_router
from .dashboard import router as dashboard_router

__all__ = [
    "health_router",
    "production_events_router",
    "shift_aggregates_router",
    "dashboard_router",
]
