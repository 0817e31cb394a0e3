# timetabling_engine/core/oracles.py

"""
Interfaces through which the search consults the scheduling rules.

The engine never inspects rules itself. Hard rules are reached through a
``ConstraintOracle`` and the soft-constraint penalty through a
``FitnessOracle``; ``timetabling_engine.constraints`` ships implementations
built from a ``ProblemContext``.
"""

import sys
from typing import Optional, Sequence, Protocol, runtime_checkable

from .problem_model import Slot

# Fitness reported for a missing or malformed assignment
MAX_FITNESS = sys.maxsize


@runtime_checkable
class ConstraintOracle(Protocol):
    def is_partially_feasible(self, assignment: Sequence[Optional[Slot]]) -> bool:
        """True if no rule over the currently fixed entries is violated."""
        ...

    def is_fully_feasible(self, assignment: Sequence[Optional[Slot]]) -> bool:
        """True if the assignment is complete and satisfies every hard rule."""
        ...


@runtime_checkable
class FitnessOracle(Protocol):
    def fitness(self, assignment: Optional[Sequence[Optional[Slot]]]) -> int:
        """Soft-constraint penalty, lower is better; MAX_FITNESS if invalid."""
        ...
