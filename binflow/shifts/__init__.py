"""
Shift Reporting Module
"""
from .clock import BusinessClock, get_business_clock
from .errors import (
    BinFlowError,
    ConcurrencyConflict,
    ConfigurationFailure,
    NotFoundError,
    PersistenceFailure,
    ValidationFailure,
)
from .metrics import ShiftMetrics, efficiency_percentage, recompute

__all__ = [
    "BusinessClock",
    "get_business_clock",
    "BinFlowError",
    "ConcurrencyConflict",
    "ConfigurationFailure",
    "NotFoundError",
    "PersistenceFailure",
    "ValidationFailure",
    "ShiftMetrics",
    "efficiency_percentage",
    "recompute",
]
