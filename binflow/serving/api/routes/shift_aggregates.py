"""
Shift Aggregate Endpoints

CRUD over shift reports. Bins tipped, average weight and downtime are
recomputed from the report's tippings on every read.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from binflow.config import Settings, get_settings
from binflow.database.connection import get_db_dependency, get_optional_db_dependency
from binflow.database.models import ShiftReport
from binflow.serving.api.routes.production_events import BinTippingResponse
from binflow.shifts.clock import BusinessClock, get_business_clock, to_utc
from binflow.shifts.reports import (
    create_shift_report,
    delete_shift_report,
    demo_shift_report,
    get_shift_report,
    list_shift_reports,
    replace_shift_report,
    report_metrics,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class ShiftReportCreate(BaseModel):
    """Explicit shift report creation"""
    date: dt.datetime
    line_manager: str = Field(..., min_length=1, max_length=100)
    shift: str = Field(..., max_length=50)


class ShiftReportUpdate(BaseModel):
    """
    Full replacement of a shift report.

    Derived totals and tippings sent by the client are ignored.
    """
    id: int
    date: dt.datetime
    line_manager: str = Field(..., min_length=1, max_length=100)
    shift: str = Field(default="", max_length=50)
    version: Optional[int] = Field(default=None, description="Version the client last read")


class ShiftReportResponse(BaseModel):
    """Shift report with recomputed totals"""
    id: int
    date: dt.date
    line_manager: str
    shift: str
    total_tipped: int
    average_weight: float
    total_downtime: int
    created_at: dt.datetime
    updated_at: dt.datetime
    version: int
    bin_tippings: List[BinTippingResponse]


def to_response(report: ShiftReport) -> ShiftReportResponse:
    """Build the response from live tippings, never from stored totals"""
    metrics = report_metrics(report)
    return ShiftReportResponse(
        id=report.id,
        date=report.date,
        line_manager=report.line_manager,
        shift=report.shift,
        total_tipped=metrics.total_tipped,
        average_weight=metrics.average_weight,
        total_downtime=metrics.total_downtime,
        created_at=to_utc(report.created_at),
        updated_at=to_utc(report.updated_at),
        version=report.version,
        bin_tippings=[BinTippingResponse.model_validate(t) for t in report.bin_tippings],
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[ShiftReportResponse])
async def list_shift_aggregates(
    start_date: Optional[dt.datetime] = Query(None, alias="startDate"),
    end_date: Optional[dt.datetime] = Query(None, alias="endDate"),
    line_manager: Optional[str] = Query(None, alias="lineManager"),
    clock: BusinessClock = Depends(get_business_clock),
    settings: Settings = Depends(get_settings),
    db: Optional[AsyncSession] = Depends(get_optional_db_dependency),
) -> List[ShiftReportResponse]:
    """
    List shift reports in a business-date range, newest first.

    Without a configured database a stand-in list is served instead.
    """
    if db is None:
        if settings.business.fallback_to_demo_data:
            return [ShiftReportResponse(**demo_shift_report(clock))]
        return []

    reports = await list_shift_reports(
        db, clock, start=start_date, end=end_date, line_manager=line_manager
    )
    logger.info("Shift reports returned", count=len(reports))
    return [to_response(r) for r in reports]


@router.get("/{report_id}", response_model=ShiftReportResponse, name="get_shift_aggregate")
async def get_shift_aggregate(
    report_id: int,
    db: AsyncSession = Depends(get_db_dependency),
) -> ShiftReportResponse:
    """Get one shift report with recomputed totals."""
    report = await get_shift_report(db, report_id)
    return to_response(report)


@router.post("", response_model=ShiftReportResponse, status_code=201)
async def create_shift_aggregate(
    payload: ShiftReportCreate,
    request: Request,
    response: Response,
    clock: BusinessClock = Depends(get_business_clock),
    db: AsyncSession = Depends(get_db_dependency),
) -> ShiftReportResponse:
    """Create a shift report directly."""
    report = await create_shift_report(
        db,
        clock,
        when=payload.date,
        line_manager=payload.line_manager,
        shift=payload.shift,
    )
    response.headers["Location"] = str(
        request.url_for("get_shift_aggregate", report_id=report.id)
    )
    return to_response(report)


@router.put("/{report_id}", status_code=204)
async def replace_shift_aggregate(
    report_id: int,
    payload: ShiftReportUpdate,
    clock: BusinessClock = Depends(get_business_clock),
    db: AsyncSession = Depends(get_db_dependency),
) -> Response:
    """Replace a shift report's date, line manager and shift label."""
    await replace_shift_report(
        db,
        clock,
        report_id,
        body_id=payload.id,
        when=payload.date,
        line_manager=payload.line_manager,
        shift=payload.shift,
        version=payload.version,
    )
    return Response(status_code=204)


@router.delete("/{report_id}", status_code=204)
async def delete_shift_aggregate(
    report_id: int,
    db: AsyncSession = Depends(get_db_dependency),
) -> Response:
    """Delete a shift report together with its bin tippings."""
    await delete_shift_report(db, report_id)
    return Response(status_code=204)
