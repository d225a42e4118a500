"""
Shift Report Service

Read and maintenance operations for shift reports and bin tippings. Every
read that returns a shift report loads its tippings so the derived figures
can be recomputed; stored values are never trusted.
"""

from datetime import datetime, timezone
from typing import List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from binflow.database.models import BinTipping, ShiftReport
from binflow.shifts.clock import BusinessClock, DateLike
from binflow.shifts.errors import (
    ConcurrencyConflict,
    NotFoundError,
    PersistenceFailure,
    ValidationFailure,
)
from binflow.shifts.metrics import ShiftMetrics, recompute

logger = structlog.get_logger(__name__)


def report_metrics(report: ShiftReport) -> ShiftMetrics:
    """Derived figures from the report's currently loaded tippings"""
    return recompute(report.bin_tippings)


async def get_shift_report(session: AsyncSession, report_id: int) -> ShiftReport:
    """
    Fetch one shift report with its tippings.

    Raises:
        NotFoundError: If no report has this id
    """
    result = await session.execute(
        select(ShiftReport)
        .options(selectinload(ShiftReport.bin_tippings))
        .where(ShiftReport.id == report_id)
    )
    report = result.scalar_one_or_none()
    if report is None:
        raise NotFoundError(f"Shift report {report_id} not found")
    return report


async def list_shift_reports(
    session: AsyncSession,
    clock: BusinessClock,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    line_manager: Optional[str] = None,
) -> List[ShiftReport]:
    """Shift reports in an inclusive business-date range, newest first"""
    query = select(ShiftReport).options(selectinload(ShiftReport.bin_tippings))

    if start is not None:
        query = query.where(ShiftReport.date >= clock.business_date(start))
    if end is not None:
        query = query.where(ShiftReport.date <= clock.business_date(end))
    if line_manager:
        query = query.where(ShiftReport.line_manager == line_manager.strip())

    result = await session.execute(
        query.order_by(ShiftReport.date.desc(), ShiftReport.line_manager)
    )
    reports = list(result.scalars().all())

    logger.debug("Shift reports listed", count=len(reports), start=str(start), end=str(end))
    return reports


async def create_shift_report(
    session: AsyncSession,
    clock: BusinessClock,
    *,
    when: DateLike,
    line_manager: str,
    shift: str,
) -> ShiftReport:
    """
    Create a shift report directly, without find-or-create.

    Raises:
        ValidationFailure: If the line manager is blank
        PersistenceFailure: If the (date, line manager) key already exists
            or the insert fails
    """
    manager = (line_manager or "").strip()
    if not manager:
        raise ValidationFailure("line_manager is required")

    now = clock.now()
    report = ShiftReport(
        date=clock.business_date(when),
        line_manager=manager,
        shift=shift or "",
        created_at=now,
        updated_at=now,
        bin_tippings=[],
    )
    session.add(report)
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Error creating shift report", line_manager=manager, error=str(e))
        raise PersistenceFailure(f"Error creating shift report: {e}", cause=e) from e

    logger.info("Shift report created", shift_report_id=report.id, date=str(report.date), line_manager=manager)
    return report


async def _shift_report_exists(session: AsyncSession, report_id: int) -> bool:
    result = await session.execute(select(ShiftReport.id).where(ShiftReport.id == report_id))
    return result.scalar_one_or_none() is not None


async def replace_shift_report(
    session: AsyncSession,
    clock: BusinessClock,
    report_id: int,
    *,
    body_id: int,
    when: DateLike,
    line_manager: str,
    shift: str,
    version: Optional[int] = None,
) -> ShiftReport:
    """
    Replace the editable fields of a shift report.

    Derived figures and tippings are not part of the replacement. If
    ``version`` is given it must match the stored version.

    Raises:
        ValidationFailure: Path and body ids differ, or blank line manager
        NotFoundError: The report does not exist (or vanished mid-update)
        ConcurrencyConflict: The report was modified since it was read
        PersistenceFailure: The new key collides with another report
    """
    if report_id != body_id:
        raise ValidationFailure(f"Path id {report_id} does not match body id {body_id}")

    manager = (line_manager or "").strip()
    if not manager:
        raise ValidationFailure("line_manager is required")

    report = await session.get(ShiftReport, report_id)
    if report is None:
        raise NotFoundError(f"Shift report {report_id} not found")
    if version is not None and version != report.version:
        raise ConcurrencyConflict(
            f"Shift report {report_id} was modified (version {report.version}, got {version})"
        )

    report.date = clock.business_date(when)
    report.line_manager = manager
    report.shift = shift or ""
    report.updated_at = clock.now()

    try:
        await session.commit()
    except StaleDataError as e:
        await session.rollback()
        if not await _shift_report_exists(session, report_id):
            raise NotFoundError(f"Shift report {report_id} not found") from e
        raise ConcurrencyConflict(f"Shift report {report_id} was modified concurrently", cause=e) from e
    except IntegrityError as e:
        await session.rollback()
        raise PersistenceFailure(f"Error updating shift report: {e.orig}", cause=e) from e
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceFailure(f"Error updating shift report: {e}", cause=e) from e

    logger.info("Shift report replaced", shift_report_id=report_id, version=report.version)
    return report


async def delete_shift_report(session: AsyncSession, report_id: int) -> None:
    """
    Delete a shift report and every tipping it owns.

    Raises:
        NotFoundError: If no report has this id
    """
    report = await get_shift_report(session, report_id)
    tipping_count = len(report.bin_tippings)
    await session.delete(report)
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceFailure(f"Error deleting shift report: {e}", cause=e) from e

    logger.info("Shift report deleted", shift_report_id=report_id, bin_tippings_deleted=tipping_count)


async def get_bin_tipping(session: AsyncSession, tipping_id: int) -> BinTipping:
    """
    Raises:
        NotFoundError: If no tipping has this id
    """
    tipping = await session.get(BinTipping, tipping_id)
    if tipping is None:
        raise NotFoundError(f"Bin tipping {tipping_id} not found")
    return tipping


async def list_bin_tippings(
    session: AsyncSession,
    clock: BusinessClock,
    on: Optional[DateLike] = None,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> List[BinTipping]:
    """
    Bin tippings, optionally filtered by their shift report's business date.

    ``on`` selects a single day and takes precedence over ``start``/``end``.
    Filtered results are ordered by date then time of day.
    """
    query = select(BinTipping)

    if on is None and start is None and end is None:
        result = await session.execute(query.order_by(BinTipping.id))
        return list(result.scalars().all())

    query = query.join(ShiftReport, BinTipping.shift_report_id == ShiftReport.id)
    if on is not None:
        query = query.where(ShiftReport.date == clock.business_date(on))
    else:
        if start is not None:
            query = query.where(ShiftReport.date >= clock.business_date(start))
        if end is not None:
            query = query.where(ShiftReport.date <= clock.business_date(end))

    result = await session.execute(
        query.order_by(ShiftReport.date, BinTipping.time, BinTipping.id)
    )
    return list(result.scalars().all())


def demo_shift_report(clock: BusinessClock) -> dict:
    """
    Stand-in report served when no database is configured.

    Shaped like a shift report response so the dashboard keeps rendering.
    """
    now = datetime.now(timezone.utc)
    return {
        "id": 1,
        "date": clock.today(),
        "line_manager": "John Smith",
        "shift": "Day Shift",
        "total_tipped": 120,
        "average_weight": 45.5,
        "total_downtime": 30,
        "bin_tippings": [],
        "created_at": now,
        "updated_at": now,
        "version": 1,
    }
