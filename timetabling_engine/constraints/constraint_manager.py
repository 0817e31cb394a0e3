# timetabling_engine/constraints/constraint_manager.py

"""
Constraint manager: assembles the rule objects into the two oracles the
search consults.

``SectionConstraintOracle`` answers the partial and the full feasibility
questions; ``PenaltyFitnessOracle`` turns the soft rules into one weighted
penalty. Both are built once per problem and are stateless between calls
apart from their diagnostic counters.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

from ..core.problem_model import ProblemContext, Slot
from ..core.oracles import MAX_FITNESS
from ..config import PenaltyWeights
from .base_constraint import HardRule, SoftRule, RuleViolation
from .hard_constraints import (
    SlotCapacityRule,
    CourseLabOverlapRule,
    NotCompatibleRule,
    PartialAssignmentRule,
    UnwantedSlotRule,
    EveningSectionRule,
    SeniorCourseSeparationRule,
    FullAssignmentRule,
)
from .soft_constraints import (
    MinimumFillRule,
    PreferenceSlotsRule,
    PairedClassesRule,
    SectionSpreadRule,
)

logger = logging.getLogger(__name__)

# Rules checked on every partial assignment, cheapest first
PARTIAL_RULES = (
    SlotCapacityRule,
    PartialAssignmentRule,
    UnwantedSlotRule,
    EveningSectionRule,
    NotCompatibleRule,
    CourseLabOverlapRule,
    SeniorCourseSeparationRule,
)

SOFT_RULES = (
    MinimumFillRule,
    PreferenceSlotsRule,
    PairedClassesRule,
    SectionSpreadRule,
)


class SectionConstraintOracle:
    """Hard-rule oracle for course and lab timetables."""

    def __init__(self, context: ProblemContext):
        self.context = context
        self.partial_rules: List[HardRule] = [rule(context) for rule in PARTIAL_RULES]
        self.completion_rule = FullAssignmentRule(context)
        logger.info(
            f"Constraint oracle ready with {len(self.partial_rules) + 1} hard rules"
        )

    def _well_formed(self, assignment: Optional[Sequence[Optional[Slot]]]) -> bool:
        if assignment is None:
            return False
        if len(assignment) != self.context.num_classes:
            logger.warning(
                f"Rejecting assignment of length {len(assignment)}, "
                f"expected {self.context.num_classes}"
            )
            return False
        return True

    def is_partially_feasible(self, assignment: Sequence[Optional[Slot]]) -> bool:
        if not self._well_formed(assignment):
            return False
        return all(rule.holds(assignment) for rule in self.partial_rules)

    def is_fully_feasible(self, assignment: Sequence[Optional[Slot]]) -> bool:
        if not self._well_formed(assignment):
            return False
        return self.completion_rule.holds(assignment) and self.is_partially_feasible(
            assignment
        )

    def explain(self, assignment: Sequence[Optional[Slot]]) -> List[RuleViolation]:
        """First violation of every hard rule that fails, for diagnostics."""
        violations = []
        for rule in [self.completion_rule] + self.partial_rules:
            found = rule.find_violation(assignment)
            if found is not None:
                violations.append(found)
        return violations

    def get_statistics(self) -> Dict[str, Any]:
        return {
            rule.constraint_id: rule.get_statistics()
            for rule in [self.completion_rule] + self.partial_rules
        }


class PenaltyFitnessOracle:
    """
    Weighted soft-constraint penalty:

        w_min_filled * minfilled + w_pref * pref + w_pair * pair + w_sec_diff * secdiff

    Lower is better. A missing or wrongly sized assignment scores MAX_FITNESS.
    """

    def __init__(self, context: ProblemContext, weights: Optional[PenaltyWeights] = None):
        self.context = context
        self.weights = weights or PenaltyWeights()
        self.rules: List[SoftRule] = [rule(context, self.weights) for rule in SOFT_RULES]

    def fitness(self, assignment: Optional[Sequence[Optional[Slot]]]) -> int:
        if assignment is None or len(assignment) != self.context.num_classes:
            return MAX_FITNESS
        return sum(rule.weighted_penalty(assignment) for rule in self.rules)

    def breakdown(self, assignment: Sequence[Optional[Slot]]) -> Dict[str, int]:
        """Weighted penalty per soft rule."""
        return {rule.constraint_id: rule.weighted_penalty(assignment) for rule in self.rules}
