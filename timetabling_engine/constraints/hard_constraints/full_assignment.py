# timetabling_engine/constraints/hard_constraints/full_assignment.py

"""
Full Assignment Hard Rule

Every class has a slot. Only applied to finished timetables.
"""

from typing import Optional

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import UNASSIGNED


class FullAssignmentRule(HardRule):
    constraint_id = "FULL_ASSIGNMENT"
    name = "All Classes Scheduled"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for index, slot in enumerate(assignment):
            if slot is UNASSIGNED:
                return self.violation(
                    (index,), f"{self.context.class_at(index).name} is unassigned"
                )
        return None
