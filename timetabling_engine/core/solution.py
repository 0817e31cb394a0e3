# timetabling_engine/core/solution.py

"""
Assignment representation and the result types returned by the searches.

An assignment is a tuple with one entry per class (courses first, then labs);
each entry is a ``Slot`` or ``UNASSIGNED``. Searches never raise to report that
no assignment was found: they return a ``SearchResult`` whose status tells the
caller whether to use the assignment or skip it.
"""

from typing import Dict, List, Optional, Any, Tuple, Sequence
from dataclasses import dataclass, field, asdict
from enum import Enum
import logging

from .problem_model import ProblemContext, Slot, UNASSIGNED

logger = logging.getLogger(__name__)

Assignment = Tuple[Optional[Slot], ...]


class SearchStatus(Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


def count_unassigned(assignment: Sequence[Optional[Slot]]) -> int:
    return sum(1 for entry in assignment if entry is UNASSIGNED)


def is_complete(assignment: Sequence[Optional[Slot]]) -> bool:
    return all(entry is not UNASSIGNED for entry in assignment)


def assignment_to_dict(
    context: ProblemContext, assignment: Sequence[Optional[Slot]]
) -> Dict[str, Optional[str]]:
    """Map class names to "DAY, HH:MM" (None when unassigned)."""
    result: Dict[str, Optional[str]] = {}
    for index, entry in enumerate(assignment):
        name = context.class_at(index).name
        if entry is UNASSIGNED:
            result[name] = None
        else:
            hours, _, minutes = entry.time.partition(":")
            result[name] = f"{entry.day}, {hours.zfill(2)}:{minutes}"
    return result


@dataclass
class SearchStats:
    """Counters collected during one search call."""

    expansions: int = 0
    dead_ends: int = 0
    frontier_jumps: int = 0
    frontier_resets: int = 0
    peak_frontier_size: int = 0
    alternatives_used: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SearchResult:
    status: SearchStatus
    assignment: Optional[Assignment] = None
    stats: SearchStats = field(default_factory=SearchStats)
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == SearchStatus.SUCCESS

    @classmethod
    def success(cls, assignment: Sequence[Optional[Slot]], stats: SearchStats) -> "SearchResult":
        return cls(SearchStatus.SUCCESS, tuple(assignment), stats)

    @classmethod
    def exhausted(cls, stats: SearchStats, reason: str = "") -> "SearchResult":
        return cls(SearchStatus.EXHAUSTED, None, stats, reason)


@dataclass
class PopulationStatistics:
    """Fitness summary of one population snapshot (lower fitness is better)."""

    size: int
    min_fitness: float
    max_fitness: float
    mean_fitness: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def unique_assignments(assignments: Sequence[Assignment]) -> List[Assignment]:
    """Drop duplicates, keeping first occurrences in order."""
    seen = set()
    unique = []
    for assignment in assignments:
        if assignment not in seen:
            seen.add(assignment)
            unique.append(assignment)
    return unique
