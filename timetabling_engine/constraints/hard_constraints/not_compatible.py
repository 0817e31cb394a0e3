# timetabling_engine/constraints/hard_constraints/not_compatible.py

"""
Not-Compatible Hard Rule

For every not-compatible(a, b) statement, a and b must not share a time. Two
classes of the same kind conflict when they sit in the same slot; a lecture
and a lab conflict when their meetings overlap.
"""

from typing import Optional
import logging

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from .course_lab_overlap import slots_overlap
from ...core.problem_model import UNASSIGNED

logger = logging.getLogger(__name__)


class NotCompatibleRule(HardRule):
    constraint_id = "NOT_COMPATIBLE"
    name = "Not-Compatible Classes"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for first, second in self.context.not_compatible:
            slot_a = assignment[first]
            slot_b = assignment[second]
            if slot_a is UNASSIGNED or slot_b is UNASSIGNED:
                continue
            if slot_a.kind == slot_b.kind:
                clash = slot_a.day_time == slot_b.day_time
            else:
                clash = slots_overlap(slot_a, slot_b)
            if clash:
                return self.violation(
                    (first, second),
                    f"{self.context.class_at(first).name} and "
                    f"{self.context.class_at(second).name} are not compatible",
                )
        return None
