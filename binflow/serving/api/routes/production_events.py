"""
Production Event Endpoints

Bin tipping submission and retrieval. Submitting a tipping finds or creates
the shift report for its (business date, line manager).
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from binflow.database.connection import get_db_dependency
from binflow.database.models import DowntimeReason
from binflow.shifts.clock import BusinessClock, get_business_clock
from binflow.shifts.reports import get_bin_tipping, list_bin_tippings
from binflow.shifts.resolver import ShiftKeyResolver

router = APIRouter()


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class BinTippingCreate(BaseModel):
    """Bin tipping submission"""
    date: dt.datetime = Field(..., description="Timestamp of the entry; naive values are business-local")
    time: Optional[dt.time] = Field(
        default=None,
        description="Time of day; defaults to the time part of date. Offsets are converted to business time",
    )
    line_manager: str = Field(..., min_length=1, max_length=100)
    shift: str = Field(default="", max_length=50)
    bins_tipped: int = Field(default=0, ge=0)
    average_bin_weight: float = Field(default=0.0, ge=0)
    down_time: int = Field(default=0, ge=0, description="Downtime in minutes")
    reasons_notes: str = Field(default="", description="Reason for not achieving target")
    is_lunch_break: bool = False


class BinTippingResponse(BaseModel):
    """Bin tipping response"""
    id: int
    shift_report_id: int
    time: dt.time
    bins_tipped: int
    average_bin_weight: float
    down_time: int
    reason_for_not_achieving_target: Optional[str]
    is_lunch_break: bool

    model_config = ConfigDict(from_attributes=True)


class DowntimeReasonOption(BaseModel):
    value: str
    label: str


def get_shift_key_resolver(clock: BusinessClock = Depends(get_business_clock)) -> ShiftKeyResolver:
    return ShiftKeyResolver(clock)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", response_model=BinTippingResponse, status_code=201)
async def create_production_event(
    payload: BinTippingCreate,
    request: Request,
    response: Response,
    resolver: ShiftKeyResolver = Depends(get_shift_key_resolver),
    db: AsyncSession = Depends(get_db_dependency),
) -> BinTippingResponse:
    """
    Record a bin tipping.

    The owning shift report is created on the first submission for its
    date and line manager.
    """
    tipping = await resolver.record_tipping(
        db,
        when=payload.date,
        line_manager=payload.line_manager,
        shift=payload.shift,
        time_of_day=payload.time,
        bins_tipped=payload.bins_tipped,
        average_bin_weight=payload.average_bin_weight,
        down_time=payload.down_time,
        reason=payload.reasons_notes,
        is_lunch_break=payload.is_lunch_break,
    )
    response.headers["Location"] = str(
        request.url_for("get_production_event", event_id=tipping.id)
    )
    return BinTippingResponse.model_validate(tipping)


@router.get("", response_model=List[BinTippingResponse])
async def list_production_events(
    date: Optional[dt.datetime] = Query(None, description="Business date of the owning shift report"),
    start_date: Optional[dt.datetime] = Query(None, alias="startDate"),
    end_date: Optional[dt.datetime] = Query(None, alias="endDate"),
    clock: BusinessClock = Depends(get_business_clock),
    db: AsyncSession = Depends(get_db_dependency),
) -> List[BinTippingResponse]:
    """
    List bin tippings.

    With ``date`` (or a ``startDate``/``endDate`` range) only tippings whose
    shift report falls on those business dates are returned, ordered by
    date and time of day.
    """
    tippings = await list_bin_tippings(db, clock, on=date, start=start_date, end=end_date)
    return [BinTippingResponse.model_validate(t) for t in tippings]


@router.get("/downtime-reasons", response_model=List[DowntimeReasonOption])
async def list_downtime_reasons() -> List[DowntimeReasonOption]:
    """Common shortfall reasons for front-end pick lists."""
    return [
        DowntimeReasonOption(value=reason.value, label=reason.value.replace("_", " ").capitalize())
        for reason in DowntimeReason
    ]


@router.get("/{event_id}", response_model=BinTippingResponse, name="get_production_event")
async def get_production_event(
    event_id: int,
    db: AsyncSession = Depends(get_db_dependency),
) -> BinTippingResponse:
    """Get one bin tipping by id."""
    tipping = await get_bin_tipping(db, event_id)
    return BinTippingResponse.model_validate(tipping)
