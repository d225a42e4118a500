"""
Shift Metrics

Derived figures for a shift report, folded from its bin tippings every time
a report is read. Nothing here is ever read back from storage.
"""

from dataclasses import dataclass
from typing import Iterable, Protocol

DEFAULT_SHIFT_MINUTES = 480


class TippingLike(Protocol):
    bins_tipped: int
    average_bin_weight: float
    down_time: int


@dataclass(frozen=True)
class ShiftMetrics:
    """Summary of one shift report's tippings"""

    total_tipped: int = 0
    average_weight: float = 0.0
    total_downtime: int = 0
    tipping_count: int = 0

    def efficiency(self, shift_minutes: int = DEFAULT_SHIFT_MINUTES) -> float:
        return efficiency_percentage(self.total_downtime, shift_minutes)


def recompute(tippings: Iterable[TippingLike]) -> ShiftMetrics:
    """
    Fold a collection of tippings into shift metrics.

    Average weight is the plain mean of the per-tipping average weights and
    is 0.0 for an empty collection.
    """
    total_tipped = 0
    total_downtime = 0
    weight_sum = 0.0
    count = 0

    for tipping in tippings:
        total_tipped += tipping.bins_tipped
        total_downtime += tipping.down_time
        weight_sum += tipping.average_bin_weight
        count += 1

    return ShiftMetrics(
        total_tipped=total_tipped,
        average_weight=weight_sum / count if count else 0.0,
        total_downtime=total_downtime,
        tipping_count=count,
    )


def raw_efficiency(total_downtime: int, shift_minutes: int = DEFAULT_SHIFT_MINUTES) -> float:
    """Unrounded efficiency; a shift with no downtime is exactly 100"""
    if total_downtime > 0:
        return (1.0 - total_downtime / shift_minutes) * 100
    return 100.0


def efficiency_percentage(total_downtime: int, shift_minutes: int = DEFAULT_SHIFT_MINUTES) -> float:
    """
    Share of the shift budget not lost to downtime, as a percentage.

    Rounded to 2 decimals. Downtime beyond the budget yields a negative
    figure; it is reported as is.
    """
    if total_downtime > 0:
        return round(raw_efficiency(total_downtime, shift_minutes), 2)
    return 100.0
