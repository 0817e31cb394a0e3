# timetabling_engine/__init__.py

"""
Timetabling Engine Package Initialization

Randomized or-tree search and set-based refinement for course and lab
timetabling. A run seeds a population of feasible timetables with
cold-start searches and improves it by parent-guided crossover and pruning.
"""

from .config import (
    SchedulingEngineConfig,
    SearchConfig,
    PopulationConfig,
    PenaltyWeights,
    CycleAction,
    config,
    get_logger,
)
from .exceptions import SchedulingEngineError, ProblemConfigurationError

from .core import (
    ProblemContext,
    Slot,
    SlotKind,
    ClassSection,
    UNASSIGNED,
    SearchResult,
    SearchStatus,
    ConstraintOracle,
    FitnessOracle,
    MAX_FITNESS,
)
from .constraints import SectionConstraintOracle, PenaltyFitnessOracle
from .search import OrTreeSearch, DEAD_SCORE
from .genetic_algorithm import PopulationController, RouletteSelector
from .scheduler import TimetableScheduler, ScheduleResult

__version__ = "1.0.0"

# Package-level exports
__all__ = [
    # Configuration
    "SchedulingEngineConfig",
    "SearchConfig",
    "PopulationConfig",
    "PenaltyWeights",
    "CycleAction",
    "config",
    "get_logger",
    # Errors
    "SchedulingEngineError",
    "ProblemConfigurationError",
    # Core components
    "ProblemContext",
    "Slot",
    "SlotKind",
    "ClassSection",
    "UNASSIGNED",
    "SearchResult",
    "SearchStatus",
    "ConstraintOracle",
    "FitnessOracle",
    "MAX_FITNESS",
    # Engine
    "SectionConstraintOracle",
    "PenaltyFitnessOracle",
    "OrTreeSearch",
    "DEAD_SCORE",
    "PopulationController",
    "RouletteSelector",
    "TimetableScheduler",
    "ScheduleResult",
]
