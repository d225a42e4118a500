"""
Shift Key Resolver

Maps an incoming bin tipping submission onto the shift report it belongs
to. A shift report is keyed by (business date, line manager); the first
submission for a key creates the report, later ones reuse it.

Create-if-absent is a single ``INSERT ... ON CONFLICT DO NOTHING`` against
the unique (date, line_manager) constraint followed by a select, so two
concurrent submissions for the same key always land on the same row. The
report upsert and the tipping insert commit together or not at all.
"""

from datetime import date, datetime, time
from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from binflow.database.models import BinTipping, ShiftReport
from binflow.shifts.clock import BusinessClock, DateLike
from binflow.shifts.errors import PersistenceFailure, ValidationFailure

logger = structlog.get_logger(__name__)


def _dialect_insert(dialect_name: str):
    """Dialect insert construct that supports ON CONFLICT, or None"""
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


class ShiftKeyResolver:
    """
    Find-or-create for shift reports.

    Args:
        clock: Business clock used to derive the report date and audit
            timestamps. Fixed for the lifetime of the resolver.
    """

    def __init__(self, clock: BusinessClock):
        self.clock = clock

    def key_for(self, when: DateLike, line_manager: str) -> tuple[date, str]:
        """Normalized (date, line manager) key for a submission"""
        manager = (line_manager or "").strip()
        if not manager:
            raise ValidationFailure("line_manager is required")
        return self.clock.business_date(when), manager

    async def resolve(
        self,
        session: AsyncSession,
        when: DateLike,
        line_manager: str,
        shift: str = "",
    ) -> ShiftReport:
        """
        Return the shift report for the submission's key, creating it if absent.

        Flushes but does not commit; the caller owns the transaction.
        """
        report_date, manager = self.key_for(when, line_manager)
        now = self.clock.now()

        insert = _dialect_insert(session.get_bind().dialect.name)
        if insert is not None:
            stmt = (
                insert(ShiftReport)
                .values(
                    date=report_date,
                    line_manager=manager,
                    shift=shift or "",
                    created_at=now,
                    updated_at=now,
                    version=1,
                )
                .on_conflict_do_nothing(index_elements=["date", "line_manager"])
            )
            await session.execute(stmt)
        else:
            await self._insert_in_savepoint(session, report_date, manager, shift, now)

        result = await session.execute(
            select(ShiftReport).where(
                ShiftReport.date == report_date,
                ShiftReport.line_manager == manager,
            )
        )
        report = result.scalar_one()

        # Plain UPDATE: bumping the audit time must not trip the version check
        await session.execute(
            update(ShiftReport)
            .where(ShiftReport.id == report.id)
            .values(updated_at=now)
        )

        logger.debug(
            "Shift report resolved",
            shift_report_id=report.id,
            date=str(report_date),
            line_manager=manager,
        )
        return report

    async def _insert_in_savepoint(
        self,
        session: AsyncSession,
        report_date: date,
        manager: str,
        shift: str,
        now: datetime,
    ) -> None:
        """Portable create-if-absent for dialects without ON CONFLICT"""
        existing = await session.execute(
            select(ShiftReport.id).where(
                ShiftReport.date == report_date,
                ShiftReport.line_manager == manager,
            )
        )
        if existing.scalar_one_or_none() is not None:
            return
        try:
            async with session.begin_nested():
                session.add(
                    ShiftReport(
                        date=report_date,
                        line_manager=manager,
                        shift=shift or "",
                        created_at=now,
                        updated_at=now,
                        bin_tippings=[],
                    )
                )
        except IntegrityError:
            logger.info("Shift report created concurrently", date=str(report_date), line_manager=manager)

    async def record_tipping(
        self,
        session: AsyncSession,
        *,
        when: DateLike,
        line_manager: str,
        shift: str = "",
        time_of_day: Optional[time] = None,
        bins_tipped: int = 0,
        average_bin_weight: float = 0.0,
        down_time: int = 0,
        reason: str = "",
        is_lunch_break: bool = False,
    ) -> BinTipping:
        """
        Resolve the owning shift report and attach a new bin tipping to it.

        When ``time_of_day`` is omitted the time component of ``when`` in
        the business timezone is used. A ``time_of_day`` carrying a UTC offset
        is converted to business wall-clock time.

        Raises:
            ValidationFailure: If the line manager is blank
            PersistenceFailure: If either write fails; nothing is kept
        """
        try:
            report = await self.resolve(session, when, line_manager, shift)
            tipping = BinTipping(
                shift_report_id=report.id,
                time=self.clock.time_of_day(when, time_of_day),
                bins_tipped=bins_tipped,
                average_bin_weight=average_bin_weight,
                down_time=down_time,
                reason_for_not_achieving_target=reason or "",
                is_lunch_break=is_lunch_break,
            )
            session.add(tipping)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(
                "Error creating bin tipping",
                line_manager=line_manager,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceFailure(f"Error creating bin tipping: {e}", cause=e) from e

        logger.info(
            "Bin tipping recorded",
            bin_tipping_id=tipping.id,
            shift_report_id=tipping.shift_report_id,
            bins_tipped=bins_tipped,
            down_time=down_time,
        )
        return tipping
