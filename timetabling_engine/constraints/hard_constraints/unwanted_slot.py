# timetabling_engine/constraints/hard_constraints/unwanted_slot.py

"""
Unwanted Slot Hard Rule

A class listed in unwanted(a, s) must not be assigned to s.
"""

from typing import Optional

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import UNASSIGNED


class UnwantedSlotRule(HardRule):
    constraint_id = "UNWANTED_SLOT"
    name = "Unwanted Slots Avoided"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for index, day, time in self.context.unwanted:
            slot = assignment[index]
            if slot is not UNASSIGNED and slot.day_time == (day, time):
                return self.violation(
                    (index,),
                    f"{self.context.class_at(index).name} placed in unwanted {slot!r}",
                )
        return None
