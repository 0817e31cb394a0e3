# timetabling_engine/constraints/base_constraint.py

"""
Base classes for the timetabling rules.

Every rule is built once from the ``ProblemContext`` it checks and is then
evaluated against many assignments. Hard rules only look at entries that are
already fixed, so the same rule serves both the partial check used while the
tree grows and the full check applied to finished timetables.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Sequence, Tuple
from dataclasses import dataclass
import logging

from ..core.problem_model import ProblemContext, Slot
from ..config import PenaltyWeights

logger = logging.getLogger(__name__)

AssignmentView = Sequence[Optional[Slot]]


@dataclass(frozen=True)
class RuleViolation:
    """First offending entry found by a hard rule"""

    constraint_id: str
    class_indices: Tuple[int, ...]
    message: str


class HardRule(ABC):
    """A rule every accepted timetable must satisfy."""

    constraint_id: str = ""
    name: str = ""

    def __init__(self, context: ProblemContext):
        self.context = context
        self.check_count = 0
        self.violation_count = 0
        logger.debug(f"Initialized hard rule '{self.constraint_id}'")

    @abstractmethod
    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        """Return the first violation among the fixed entries, or None."""

    def holds(self, assignment: AssignmentView) -> bool:
        self.check_count += 1
        if self.find_violation(assignment) is None:
            return True
        self.violation_count += 1
        return False

    def violation(self, indices: Tuple[int, ...], message: str) -> RuleViolation:
        return RuleViolation(self.constraint_id, indices, message)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "constraint_id": self.constraint_id,
            "checks": self.check_count,
            "violations": self.violation_count,
        }


class SoftRule(ABC):
    """A preference whose violations add to the fitness penalty."""

    constraint_id: str = ""
    name: str = ""
    # Attribute of PenaltyWeights scaling this rule's penalty
    weight_key: str = ""

    def __init__(self, context: ProblemContext, weights: PenaltyWeights):
        self.context = context
        self.weights = weights

    @property
    def weight(self) -> int:
        return getattr(self.weights, self.weight_key)

    @abstractmethod
    def penalty(self, assignment: AssignmentView) -> int:
        """Unweighted penalty of the assignment."""

    def weighted_penalty(self, assignment: AssignmentView) -> int:
        return self.weight * self.penalty(assignment)
