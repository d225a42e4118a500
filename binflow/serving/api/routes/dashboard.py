"""
Dashboard Endpoint

Today's production stats and trailing per-shift metrics for the dashboard
charts.
"""

import datetime as dt
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from binflow.config import Settings, get_settings
from binflow.database.connection import get_db_dependency
from binflow.shifts.clock import BusinessClock, get_business_clock
from binflow.shifts.dashboard import build_dashboard

router = APIRouter()


class ProductionMetricsResponse(BaseModel):
    """Per-shift chart point"""
    date: dt.date
    line_manager: str
    total_bins_tipped: int
    average_weight: float
    total_downtime: int
    efficiency_percentage: float

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    """Dashboard summary"""
    total_shifts_today: int
    total_bins_tipped_today: int
    average_efficiency_today: float
    total_downtime_today: int
    recent_metrics: List[ProductionMetricsResponse]

    model_config = ConfigDict(from_attributes=True)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    clock: BusinessClock = Depends(get_business_clock),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_dependency),
) -> DashboardResponse:
    """
    Dashboard stats for today in the business timezone.

    Efficiency assumes a fixed shift budget (``SHIFT_MINUTES``).
    """
    stats = await build_dashboard(
        db,
        clock,
        shift_minutes=settings.business.shift_minutes,
        window_days=settings.business.dashboard_window_days,
    )
    return DashboardResponse.model_validate(stats)
