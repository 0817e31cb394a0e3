# timetabling_engine/constraints/hard_constraints/evening_sections.py

"""
Evening Sections Hard Rule

Sections numbered 9x are evening classes and must go into evening slots
(starting 18:00 or later).
"""

from typing import Optional

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import UNASSIGNED


class EveningSectionRule(HardRule):
    constraint_id = "EVENING_SECTIONS"
    name = "Evening Sections in Evening Slots"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for index, slot in enumerate(assignment):
            if slot is UNASSIGNED or slot.is_evening:
                continue
            section = self.context.class_at(index)
            if section.is_evening:
                return self.violation(
                    (index,), f"Evening section {section.name} placed at {slot!r}"
                )
        return None
