"""
Dashboard Summary

Today's production figures plus per-report metrics for the trailing window,
all folded from live bin tippings.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from binflow.database.models import ShiftReport
from binflow.shifts.clock import BusinessClock
from binflow.shifts.metrics import DEFAULT_SHIFT_MINUTES, raw_efficiency, recompute
from binflow.shifts.reports import list_shift_reports


@dataclass(frozen=True)
class ProductionMetrics:
    """Dashboard chart point for one shift report"""
    date: date
    line_manager: str
    total_bins_tipped: int
    average_weight: float
    total_downtime: int
    efficiency_percentage: float


@dataclass
class DashboardStats:
    total_shifts_today: int = 0
    total_bins_tipped_today: int = 0
    average_efficiency_today: float = 0.0
    total_downtime_today: int = 0
    recent_metrics: List[ProductionMetrics] = field(default_factory=list)


def summarize(
    reports: Iterable[ShiftReport],
    today: date,
    shift_minutes: int = DEFAULT_SHIFT_MINUTES,
) -> DashboardStats:
    """
    Fold shift reports (with tippings loaded) into dashboard stats.

    ``recent_metrics`` keeps every report passed in, newest date first.
    """
    recent: List[ProductionMetrics] = []
    todays_efficiency: List[float] = []
    stats = DashboardStats()

    for report in sorted(reports, key=lambda r: r.date, reverse=True):
        metrics = recompute(report.bin_tippings)
        efficiency = raw_efficiency(metrics.total_downtime, shift_minutes)

        recent.append(
            ProductionMetrics(
                date=report.date,
                line_manager=report.line_manager,
                total_bins_tipped=metrics.total_tipped,
                average_weight=metrics.average_weight,
                total_downtime=metrics.total_downtime,
                efficiency_percentage=round(efficiency, 2),
            )
        )

        if report.date == today:
            stats.total_shifts_today += 1
            stats.total_bins_tipped_today += metrics.total_tipped
            stats.total_downtime_today += metrics.total_downtime
            todays_efficiency.append(efficiency)

    if todays_efficiency:
        stats.average_efficiency_today = round(sum(todays_efficiency) / len(todays_efficiency), 2)
    stats.recent_metrics = recent
    return stats


async def build_dashboard(
    session: AsyncSession,
    clock: BusinessClock,
    shift_minutes: int = DEFAULT_SHIFT_MINUTES,
    window_days: int = 7,
    today: Optional[date] = None,
) -> DashboardStats:
    """Load the trailing window of shift reports and summarize it"""
    today = today or clock.today()
    reports = await list_shift_reports(
        session,
        clock,
        start=today - timedelta(days=window_days),
        end=today,
    )
    return summarize(reports, today, shift_minutes)
