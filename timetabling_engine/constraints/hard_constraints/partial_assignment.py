# timetabling_engine/constraints/hard_constraints/partial_assignment.py

"""
Partial Assignment Hard Rule

Classes named in a partial assignment stay in their given slot.
"""

from typing import Optional

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import UNASSIGNED


class PartialAssignmentRule(HardRule):
    constraint_id = "PARTIAL_ASSIGNMENT"
    name = "Partial Assignments Respected"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for index, required in enumerate(self.context.initial_assignment):
            if required is UNASSIGNED:
                continue
            actual = assignment[index]
            if actual is not UNASSIGNED and actual != required:
                return self.violation(
                    (index,),
                    f"{self.context.class_at(index).name} must be at {required!r}, "
                    f"found {actual!r}",
                )
        return None
