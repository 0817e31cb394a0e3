# timetabling_engine/utils/__init__.py

"""
Utilities package for the timetabling engine.
Provides structured run logging and the time-budget watchdog.
"""

from .logging import (
    RunLogger,
    LogLevel,
    RunPhase,
    RunLogEntry,
    CycleMetrics,
    StructuredFormatter,
)
from .watchdog import TimeBudgetWatchdog

# Public API
__all__ = [
    "RunLogger",
    "LogLevel",
    "RunPhase",
    "RunLogEntry",
    "CycleMetrics",
    "StructuredFormatter",
    "TimeBudgetWatchdog",
]
