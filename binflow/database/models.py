"""
Database Models

Two tables back the service:

- ShiftReport: one row per (calendar date, line manager)
- BinTipping: hourly production entries owned by a shift report

Derived shift figures (bins tipped, average weight, downtime) are not
columns; they are recomputed from the tippings whenever a report is read.
"""

import datetime as dt
from enum import Enum
from typing import Optional, List

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


class UTCDateTime(TypeDecorator):
    """
    Instants stored as naive UTC, returned as aware UTC.

    Keeps every backend (PostgreSQL, SQLite) on one representation no
    matter which timezone the value was produced in.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class DowntimeReason(str, Enum):
    """Common reasons a line falls short of its tipping target"""
    NONE = "none"
    ROTATION_FROM_JUMBLE_FILLERS = "rotation_from_jumble_fillers"
    PUC_VARIETY_EXCHANGE = "puc_variety_exchange"
    PUC_EXCHANGE = "puc_exchange"
    LUNCH = "lunch"
    WAITING_FOR_PACKING_INSTRUCTION = "waiting_for_packing_instruction"
    CLEANING_FOR_NEXT_SHIFT = "cleaning_for_next_shift"
    MACHINE_BREAKDOWN = "machine_breakdown"
    MATERIAL_SHORTAGE = "material_shortage"
    QUALITY_ISSUE = "quality_issue"
    OTHER = "other"


# =============================================================================
# TABLES
# =============================================================================

class ShiftReport(Base):
    """
    Shift Report

    The per-day, per-line-manager document that owns bin tippings. The
    (date, line_manager) pair is unique so concurrent submissions for the
    same shift converge on a single row.
    """
    __tablename__ = "shift_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    line_manager: Mapped[str] = mapped_column(String(100), nullable=False)
    shift: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    # Audit
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    bin_tippings: Mapped[List["BinTipping"]] = relationship(
        back_populates="shift_report",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BinTipping.time",
    )

    __table_args__ = (
        UniqueConstraint("date", "line_manager", name="uq_shift_reports_date_line_manager"),
        Index("ix_shift_reports_date", "date"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<ShiftReport id={self.id} date={self.date} line_manager={self.line_manager!r}>"


class BinTipping(Base):
    """
    Bin Tipping

    One measurement interval on the line. The calendar date comes from the
    owning shift report; only the time of day is stored here.
    """
    __tablename__ = "bin_tippings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shift_report_id: Mapped[int] = mapped_column(
        ForeignKey("shift_reports.id", ondelete="CASCADE"), nullable=False
    )
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    bins_tipped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_bin_weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    down_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reason_for_not_achieving_target: Mapped[Optional[str]] = mapped_column(Text, default="")
    is_lunch_break: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    shift_report: Mapped["ShiftReport"] = relationship(back_populates="bin_tippings")

    __table_args__ = (
        CheckConstraint("bins_tipped >= 0", name="ck_bin_tippings_bins_tipped"),
        CheckConstraint("average_bin_weight >= 0", name="ck_bin_tippings_average_bin_weight"),
        CheckConstraint("down_time >= 0", name="ck_bin_tippings_down_time"),
        Index("ix_bin_tippings_shift_report", "shift_report_id"),
    )

    def __repr__(self) -> str:
        return f"<BinTipping id={self.id} shift_report_id={self.shift_report_id} time={self.time}>"
