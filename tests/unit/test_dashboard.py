"""
Unit Tests - Dashboard Summary
"""
from datetime import date

import pytest

from binflow.database.models import BinTipping, ShiftReport
from binflow.shifts.dashboard import DashboardStats, summarize

TODAY = date(2024, 3, 10)


def report(day, manager, *entries):
    return ShiftReport(
        date=day,
        line_manager=manager,
        shift="Day Shift",
        bin_tippings=[
            BinTipping(bins_tipped=bins, average_bin_weight=weight, down_time=down)
            for bins, weight, down in entries
        ],
    )


class TestSummarize:
    """Tests for summarize"""

    def test_empty(self):
        stats = summarize([], TODAY)

        assert stats == DashboardStats()
        assert stats.average_efficiency_today == 0.0

    def test_today_totals(self):
        reports = [
            report(TODAY, "A", (10, 40.0, 0), (20, 42.0, 10)),
            report(TODAY, "B", (5, 50.0, 240)),
        ]

        stats = summarize(reports, TODAY)

        assert stats.total_shifts_today == 2
        assert stats.total_bins_tipped_today == 35
        assert stats.total_downtime_today == 250
        # mean of 97.9166... and 50.0
        assert stats.average_efficiency_today == 73.96

    def test_earlier_days_only_in_recent_metrics(self):
        reports = [
            report(date(2024, 3, 8), "A", (7, 30.0, 0)),
            report(TODAY, "A", (10, 40.0, 48)),
        ]

        stats = summarize(reports, TODAY)

        assert stats.total_shifts_today == 1
        assert stats.total_bins_tipped_today == 10
        assert [m.date for m in stats.recent_metrics] == [TODAY, date(2024, 3, 8)]

    def test_recent_metric_fields(self):
        stats = summarize([report(TODAY, "A", (10, 40.0, 0), (20, 42.0, 10))], TODAY)

        metric = stats.recent_metrics[0]
        assert metric.line_manager == "A"
        assert metric.total_bins_tipped == 30
        assert metric.average_weight == pytest.approx(41.0)
        assert metric.total_downtime == 10
        assert metric.efficiency_percentage == 97.92

    def test_report_without_tippings(self):
        stats = summarize([report(TODAY, "A")], TODAY)

        assert stats.total_shifts_today == 1
        assert stats.average_efficiency_today == 100.0
        assert stats.recent_metrics[0].average_weight == 0.0

    def test_custom_shift_budget(self):
        stats = summarize([report(TODAY, "A", (1, 1.0, 300))], TODAY, shift_minutes=600)

        assert stats.average_efficiency_today == 50.0
