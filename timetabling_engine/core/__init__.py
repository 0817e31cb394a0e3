# timetabling_engine/core/__init__.py

"""
Core module for timetabling data structures and interfaces
"""

from .problem_model import (
    ProblemContext,
    Slot,
    SlotKind,
    ClassSection,
    Preference,
    UNASSIGNED,
)
from .solution import (
    Assignment,
    SearchResult,
    SearchStatus,
    SearchStats,
    PopulationStatistics,
    count_unassigned,
    is_complete,
    assignment_to_dict,
)
from .oracles import ConstraintOracle, FitnessOracle, MAX_FITNESS

__all__ = [
    # Problem model
    "ProblemContext",
    "Slot",
    "SlotKind",
    "ClassSection",
    "Preference",
    "UNASSIGNED",
    # Solution model
    "Assignment",
    "SearchResult",
    "SearchStatus",
    "SearchStats",
    "PopulationStatistics",
    "count_unassigned",
    "is_complete",
    "assignment_to_dict",
    # Oracle interfaces
    "ConstraintOracle",
    "FitnessOracle",
    "MAX_FITNESS",
]
